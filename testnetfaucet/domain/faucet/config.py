from decimal import Decimal
from decimal import InvalidOperation
from typing import Optional

from web3 import Web3

import settings
from testnetfaucet.domain.faucet import transaction_builder
from testnetfaucet.domain.faucet.entities import FaucetConfig

PRIVATE_KEY_BYTES = 32


class ConfigurationError(Exception):
    """Invalid or missing startup configuration, the process can't start"""


def load_config(
    host: Optional[str] = None, port: Optional[int] = None
) -> FaucetConfig:
    """Reads and validates `settings`, `host` and `port` override the environment."""
    amount = _parse_int("TOKENS_PER_REQUEST", settings.TOKENS_PER_REQUEST)
    gas_price = _parse_gwei("GAS_PRICE_GWEI", settings.GAS_PRICE_GWEI)
    gas_limit = _parse_int("GAS_LIMIT", settings.GAS_LIMIT)
    try:
        transaction_builder.validate_parameters(amount, gas_price, gas_limit)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    chain_id = None
    if settings.CHAIN_ID:
        chain_id = _parse_int("CHAIN_ID", settings.CHAIN_ID)

    timeout = _parse_float(
        "GATEWAY_TIMEOUT_SECONDS", settings.GATEWAY_TIMEOUT_SECONDS
    )
    if timeout <= 0:
        raise ConfigurationError("GATEWAY_TIMEOUT_SECONDS must be positive")
    retries = _parse_int("NONCE_TOO_LOW_RETRIES", settings.NONCE_TOO_LOW_RETRIES)
    if retries < 0:
        raise ConfigurationError("NONCE_TOO_LOW_RETRIES must not be negative")

    if not settings.RPC_URL:
        raise ConfigurationError("RPC_URL is required")

    return FaucetConfig(
        rpc_url=settings.RPC_URL,
        private_key=normalize_private_key(settings.FAUCET_PRIVATE_KEY),
        amount_per_request=amount,
        gas_price=gas_price,
        gas_limit=gas_limit,
        chain_id=chain_id,
        gateway_timeout_seconds=timeout,
        nonce_too_low_retries=retries,
        host=host or settings.API_HOST,
        port=port or _parse_int("API_PORT", settings.API_PORT),
    )


def normalize_private_key(private_key: Optional[str]) -> str:
    if not private_key:
        raise ConfigurationError("FAUCET_PRIVATE_KEY is required")
    key = private_key.strip()
    if key.startswith("0x"):
        key = key[2:]
    try:
        key_bytes = bytes.fromhex(key)
    except ValueError as e:
        raise ConfigurationError("FAUCET_PRIVATE_KEY is not valid hex") from e
    if len(key_bytes) != PRIVATE_KEY_BYTES:
        raise ConfigurationError(
            f"FAUCET_PRIVATE_KEY must be {PRIVATE_KEY_BYTES} bytes, got {len(key_bytes)}"
        )
    return "0x" + key.lower()


def _parse_int(name: str, value: Optional[str]) -> int:
    try:
        return int(str(value).strip(), 10)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def _parse_float(name: str, value: Optional[str]) -> float:
    try:
        return float(str(value).strip())
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


def _parse_gwei(name: str, value: Optional[str]) -> int:
    try:
        gwei = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e
    if not gwei.is_finite():
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    wei = gwei * Decimal(Web3.to_wei(1, "gwei"))
    if wei != wei.to_integral_value():
        raise ConfigurationError(f"{name} must be a whole number of wei")
    return int(wei)
