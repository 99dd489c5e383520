import os
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(".") / ".env"
load_dotenv(dotenv_path=env_path)

ENVIRONMENT = os.getenv("PLATFORM_ENVIRONMENT", "local")


def is_production():
    return ENVIRONMENT == "production"


def is_test():
    return ENVIRONMENT == "test"


APPLICATION_NAME = "TESTNET_FAUCET"
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = os.getenv("API_PORT", "5556")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", "logs/logs.log")

# Chain
RPC_URL = os.getenv("RPC_URL", "http://localhost:8545")
# Hex encoded, "0x" prefix optional
FAUCET_PRIVATE_KEY = os.getenv("FAUCET_PRIVATE_KEY", "")
# In wei
TOKENS_PER_REQUEST = os.getenv("TOKENS_PER_REQUEST", "1000000000000000000")
GAS_PRICE_GWEI = os.getenv("GAS_PRICE_GWEI", "1")
GAS_LIMIT = os.getenv("GAS_LIMIT", "21000")
# Read from the node when not set
CHAIN_ID = os.getenv("CHAIN_ID", None)

# Every RPC call is cut off after this, including the ones made while the
# faucet account is locked
GATEWAY_TIMEOUT_SECONDS = os.getenv("GATEWAY_TIMEOUT_SECONDS", "10")
NONCE_TOO_LOW_RETRIES = os.getenv("NONCE_TOO_LOW_RETRIES", "1")
