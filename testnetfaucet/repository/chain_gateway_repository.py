import asyncio
from typing import Any
from typing import Awaitable
from typing import Dict
from typing import Optional

import aiohttp
from hexbytes import HexBytes
from web3 import AsyncWeb3
from web3.exceptions import TransactionNotFound
from web3.exceptions import Web3Exception
from web3.exceptions import Web3RPCError

from testnetfaucet import api_logger
from testnetfaucet.utils.timer import async_timer

logger = api_logger.get()

# Transport level failures, the node may or may not have seen the request
TRANSPORT_ERRORS = (aiohttp.ClientError, OSError, Web3Exception)


class GatewayUnavailableError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GatewayTimeoutError(GatewayUnavailableError):
    pass


class SubmissionRejectedError(Exception):
    """The node answered and declined the transaction"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    @property
    def is_nonce_too_low(self) -> bool:
        reason = self.reason.lower()
        # nethermind answers with error names: OldNonce, AlreadyKnown
        return any(
            token in reason
            for token in ("nonce too low", "nonce is too low", "oldnonce")
        )

    @property
    def is_already_known(self) -> bool:
        reason = self.reason.lower()
        return any(
            token in reason
            for token in ("already known", "known transaction", "alreadyknown")
        )


class ChainGatewayRepository:

    def __init__(self, rpc_url: str, timeout_seconds: float):
        self.rpc_url = rpc_url
        self.timeout_seconds = timeout_seconds
        self.web3 = AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(
                rpc_url,
                request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout_seconds)},
            )
        )

    async def close(self):
        await self.web3.provider.disconnect()

    async def is_connected(self) -> bool:
        try:
            return await self._call("is_connected", self.web3.is_connected())
        except GatewayUnavailableError:
            return False

    @async_timer("chain_gateway_repository.get_balance", logger=logger)
    async def get_balance(self, address: str) -> int:
        return await self._call("get_balance", self.web3.eth.get_balance(address))

    @async_timer("chain_gateway_repository.get_next_nonce", logger=logger)
    async def get_next_nonce(self, address: str) -> int:
        """Transaction count including the transactions still in the mempool"""
        return await self._call(
            "get_next_nonce",
            self.web3.eth.get_transaction_count(address, "pending"),
        )

    async def get_chain_id(self) -> int:
        return await self._call("get_chain_id", self.web3.eth.chain_id)

    @async_timer("chain_gateway_repository.send_raw_transaction", logger=logger)
    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        try:
            tx_hash = await self._call(
                "send_raw_transaction",
                self.web3.eth.send_raw_transaction(raw_transaction),
                raise_rpc_errors=True,
            )
        except Web3RPCError as e:
            raise SubmissionRejectedError(_rpc_error_message(e)) from e
        return _to_hex(tx_hash)

    async def get_transaction(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        try:
            transaction = await self._call(
                "get_transaction", self.web3.eth.get_transaction(tx_hash)
            )
        except TransactionNotFound:
            return None
        return dict(transaction)

    async def get_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        try:
            receipt = await self._call(
                "get_receipt", self.web3.eth.get_transaction_receipt(tx_hash)
            )
        except TransactionNotFound:
            return None
        return dict(receipt)

    async def _call(
        self, name: str, awaitable: Awaitable[Any], raise_rpc_errors: bool = False
    ) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise GatewayTimeoutError(
                f"{name} timed out after {self.timeout_seconds}s"
            ) from e
        except TransactionNotFound:
            raise
        except Web3RPCError as e:
            if raise_rpc_errors:
                raise
            raise GatewayUnavailableError(
                f"{name} failed: {_rpc_error_message(e)}"
            ) from e
        except TRANSPORT_ERRORS as e:
            raise GatewayUnavailableError(f"{name} failed: {e}") from e


def _rpc_error_message(error: Web3RPCError) -> str:
    rpc_response = getattr(error, "rpc_response", None) or {}
    rpc_error = rpc_response.get("error") if isinstance(rpc_response, dict) else None
    if isinstance(rpc_error, dict) and rpc_error.get("message"):
        return str(rpc_error["message"])
    return str(error)


def _to_hex(value: Any) -> str:
    hex_value = HexBytes(value).hex()
    if not hex_value.startswith("0x"):
        hex_value = "0x" + hex_value
    return hex_value
