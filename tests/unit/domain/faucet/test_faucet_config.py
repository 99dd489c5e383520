import pytest

import settings
from testnetfaucet.domain.faucet import config as faucet_config
from testnetfaucet.domain.faucet.config import ConfigurationError

KEY = "11" * 32


@pytest.fixture(autouse=True)
def env(monkeypatch):
    monkeypatch.setattr(settings, "RPC_URL", "http://node:8545")
    monkeypatch.setattr(settings, "FAUCET_PRIVATE_KEY", KEY)
    monkeypatch.setattr(settings, "TOKENS_PER_REQUEST", "1000")
    monkeypatch.setattr(settings, "GAS_PRICE_GWEI", "2")
    monkeypatch.setattr(settings, "GAS_LIMIT", "21000")
    monkeypatch.setattr(settings, "CHAIN_ID", None)
    monkeypatch.setattr(settings, "GATEWAY_TIMEOUT_SECONDS", "5")
    monkeypatch.setattr(settings, "NONCE_TOO_LOW_RETRIES", "1")
    monkeypatch.setattr(settings, "API_HOST", "127.0.0.1")
    monkeypatch.setattr(settings, "API_PORT", "5556")
    return monkeypatch


def test_load_config():
    config = faucet_config.load_config()

    assert config.rpc_url == "http://node:8545"
    assert config.private_key == "0x" + KEY
    assert config.amount_per_request == 1000
    assert config.gas_price == 2_000_000_000
    assert config.gas_limit == 21000
    assert config.chain_id is None
    assert config.gateway_timeout_seconds == 5.0
    assert config.nonce_too_low_retries == 1
    assert config.host == "127.0.0.1"
    assert config.port == 5556
    assert config.max_transaction_cost == 1000 + 2_000_000_000 * 21000


def test_load_config_host_port_override():
    config = faucet_config.load_config(host="0.0.0.0", port=8080)

    assert config.host == "0.0.0.0"
    assert config.port == 8080


def test_load_config_chain_id(env):
    env.setattr(settings, "CHAIN_ID", "31337")

    assert faucet_config.load_config().chain_id == 31337


def test_load_config_fractional_gwei(env):
    env.setattr(settings, "GAS_PRICE_GWEI", "0.5")

    assert faucet_config.load_config().gas_price == 500_000_000


@pytest.mark.parametrize(
    "name,value",
    [
        ("TOKENS_PER_REQUEST", "abc"),
        ("TOKENS_PER_REQUEST", "0"),
        ("TOKENS_PER_REQUEST", "1.5"),
        ("GAS_PRICE_GWEI", "free"),
        ("GAS_PRICE_GWEI", "0"),
        ("GAS_PRICE_GWEI", "0.0000000001"),
        ("GAS_PRICE_GWEI", "NaN"),
        ("GAS_LIMIT", "20000"),
        ("GAS_LIMIT", ""),
        ("CHAIN_ID", "mainnet"),
        ("GATEWAY_TIMEOUT_SECONDS", "0"),
        ("GATEWAY_TIMEOUT_SECONDS", "soon"),
        ("NONCE_TOO_LOW_RETRIES", "-1"),
        ("RPC_URL", ""),
        ("FAUCET_PRIVATE_KEY", ""),
        ("API_PORT", "http"),
    ],
)
def test_load_config_invalid(env, name, value):
    env.setattr(settings, name, value)

    with pytest.raises(ConfigurationError):
        faucet_config.load_config()


@pytest.mark.parametrize(
    "value",
    [KEY, "0x" + KEY, f" 0x{KEY.upper()} "],
)
def test_normalize_private_key(value):
    assert faucet_config.normalize_private_key(value) == "0x" + KEY.lower()


@pytest.mark.parametrize(
    "value",
    [None, "", "0x", "zz" * 32, "11" * 31, "11" * 33],
)
def test_normalize_private_key_invalid(value):
    with pytest.raises(ConfigurationError):
        faucet_config.normalize_private_key(value)
