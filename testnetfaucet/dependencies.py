from testnetfaucet import api_logger
from testnetfaucet.domain.faucet.dispatch_core import DispatchCore
from testnetfaucet.domain.faucet.entities import FaucetConfig
from testnetfaucet.repository.chain_gateway_repository import ChainGatewayRepository
from testnetfaucet.repository.signer_repository import SignerRepository

logger = api_logger.get()

_config: FaucetConfig
_chain_gateway_repository: ChainGatewayRepository
_signer_repository: SignerRepository
_dispatch_core: DispatchCore


# pylint: disable=W0603
def init_globals(config: FaucetConfig):
    global _config
    global _chain_gateway_repository
    global _signer_repository
    global _dispatch_core

    _config = config
    _chain_gateway_repository = ChainGatewayRepository(
        config.rpc_url, config.gateway_timeout_seconds
    )
    _signer_repository = SignerRepository(config.private_key)
    # The only owner of the faucet account nonce in this process
    _dispatch_core = DispatchCore(
        config, _chain_gateway_repository, _signer_repository
    )
    logger.info(
        f"Faucet initialised, rpc_url={config.rpc_url} "
        f"faucet_address={_signer_repository.address} "
        f"amount={config.amount_per_request} gas_price={config.gas_price} "
        f"gas_limit={config.gas_limit} chain_id={config.chain_id}"
    )


async def close_globals():
    await _dispatch_core.aclose()
    await _chain_gateway_repository.close()


def get_config() -> FaucetConfig:
    return _config


def get_chain_gateway_repository() -> ChainGatewayRepository:
    return _chain_gateway_repository


def get_dispatch_core() -> DispatchCore:
    return _dispatch_core
