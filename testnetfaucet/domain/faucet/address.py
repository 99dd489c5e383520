import re
from typing import Optional

from web3 import Web3

HEX_ADDRESS_RE = re.compile(r"0x[a-fA-F0-9]{40}")
TRANSACTION_HASH_RE = re.compile(r"0x[a-fA-F0-9]{64}")


def to_checksum_address(address: Optional[str]) -> Optional[str]:
    """
    Returns the address if it is `0x` prefixed and carries an exact EIP-55
    checksum, None otherwise.

    All lower or all upper case hex is rejected, as is surrounding whitespace.
    """
    if not isinstance(address, str):
        return None
    if not HEX_ADDRESS_RE.fullmatch(address):
        return None
    if not Web3.is_checksum_address(address):
        return None
    return address


def is_transaction_hash(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(TRANSACTION_HASH_RE.fullmatch(value))
