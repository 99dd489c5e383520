from eth_account import Account
from eth_account.signers.local import LocalAccount

from testnetfaucet import api_logger
from testnetfaucet.domain.faucet.entities import SignedTransaction
from testnetfaucet.domain.faucet.entities import UnsignedTransaction

logger = api_logger.get()


class SigningError(Exception):
    pass


class SignerRepository:
    """Holds the faucet account key, never logs or exposes it"""

    def __init__(self, private_key: str):
        try:
            self._account: LocalAccount = Account.from_key(private_key)
        except (ValueError, TypeError) as e:
            raise ValueError("Invalid faucet private key") from e
        logger.info(f"Faucet account loaded, address={self._account.address}")

    @property
    def address(self) -> str:
        return self._account.address

    def sign(self, transaction: UnsignedTransaction) -> SignedTransaction:
        try:
            signed = self._account.sign_transaction(transaction.to_dict())
        except Exception as e:
            raise SigningError(f"Failed to sign transaction: {e}") from e
        tx_hash = signed.hash.hex()
        if not tx_hash.startswith("0x"):
            tx_hash = "0x" + tx_hash
        return SignedTransaction(
            raw_transaction=bytes(signed.raw_transaction),
            transaction_hash=tx_hash,
        )
