import asyncio
from typing import Dict
from typing import List
from typing import Optional

import pytest
from eth_account.typed_transactions import TypedTransaction
from hexbytes import HexBytes
from web3 import Web3

from testnetfaucet.domain.faucet.entities import FaucetConfig
from testnetfaucet.repository.chain_gateway_repository import (
    SubmissionRejectedError,
)
from testnetfaucet.repository.signer_repository import SignerRepository

# Well known development key, never funded on a real network
PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
CHAIN_ID = 1337
AMOUNT = 1000
GAS_PRICE = 1_000_000_000
GAS_LIMIT = 21000


def decode(raw_transaction: bytes) -> Dict:
    return TypedTransaction.from_bytes(HexBytes(raw_transaction)).as_dict()


class FakeChain:
    """
    In-memory node with a strict mempool: a submitted nonce must equal the
    account's pending transaction count.
    """

    def __init__(self, faucet_address: str, faucet_balance: int = 10**24):
        self.faucet_address = faucet_address
        self.balances: Dict[str, int] = {faucet_address: faucet_balance}
        self.pending_nonce = 0
        self.chain_id = CHAIN_ID
        self.submitted: List[Dict] = []
        self.known_hashes: set = set()
        # consumed one per call before falling back to the real value
        self.nonce_reports: List[int] = []
        self.submit_errors: List[Exception] = []
        self.accept_then_fail: Optional[Exception] = None
        self.transaction_lookup_error: Optional[Exception] = None
        self.submit_gate: Optional[asyncio.Event] = None
        self.submit_entered = asyncio.Event()
        self.submit_calls = 0

    async def get_balance(self, address: str) -> int:
        await asyncio.sleep(0)
        return self.balances.get(address, 0)

    async def get_next_nonce(self, address: str) -> int:
        await asyncio.sleep(0)
        if self.nonce_reports:
            return self.nonce_reports.pop(0)
        return self.pending_nonce

    async def get_chain_id(self) -> int:
        return self.chain_id

    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        self.submit_calls += 1
        self.submit_entered.set()
        if self.submit_gate:
            await self.submit_gate.wait()
        await asyncio.sleep(0)
        if self.submit_errors:
            raise self.submit_errors.pop(0)
        transaction = decode(raw_transaction)
        if transaction["nonce"] < self.pending_nonce:
            raise SubmissionRejectedError("nonce too low")
        if transaction["nonce"] > self.pending_nonce:
            raise SubmissionRejectedError("nonce gap, transaction not queued")
        tx_hash = "0x" + bytes(Web3.keccak(raw_transaction)).hex()
        self.submitted.append(transaction)
        self.known_hashes.add(tx_hash)
        self.pending_nonce += 1
        if self.accept_then_fail:
            error, self.accept_then_fail = self.accept_then_fail, None
            raise error
        return tx_hash

    async def get_transaction(self, tx_hash: str) -> Optional[Dict]:
        if self.transaction_lookup_error:
            raise self.transaction_lookup_error
        if tx_hash in self.known_hashes:
            return {"hash": tx_hash}
        return None

    def mine(self):
        for transaction in self.submitted:
            recipient = Web3.to_checksum_address(HexBytes(transaction["to"]))
            self.balances[recipient] = (
                self.balances.get(recipient, 0) + transaction["value"]
            )
        self.submitted = []


@pytest.fixture
def signer():
    return SignerRepository(PRIVATE_KEY)


@pytest.fixture
def config():
    return FaucetConfig(
        rpc_url="http://localhost:8545",
        private_key=PRIVATE_KEY,
        amount_per_request=AMOUNT,
        gas_price=GAS_PRICE,
        gas_limit=GAS_LIMIT,
        chain_id=CHAIN_ID,
        gateway_timeout_seconds=1.0,
        nonce_too_low_retries=1,
        host="127.0.0.1",
        port=5556,
    )


@pytest.fixture
def chain(signer):
    return FakeChain(signer.address)
