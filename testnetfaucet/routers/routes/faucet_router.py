from fastapi import APIRouter, Depends

from testnetfaucet import api_logger
from testnetfaucet import dependencies
from testnetfaucet.domain.faucet.dispatch_core import DispatchCore
from testnetfaucet.repository.chain_gateway_repository import ChainGatewayRepository
from testnetfaucet.service.faucet import faucet_service
from testnetfaucet.service.faucet import transaction_status_service
from testnetfaucet.service.faucet.entities import (
    FaucetRequestModel,
    FaucetResponseModel,
    TransactionStatusResponseModel,
)

TAG = "Faucet"
router = APIRouter(
    prefix="/faucet",
)
router.tags = [TAG]

logger = api_logger.get()


@router.post(
    "",
    name="Faucet",
    description="Send a fixed amount of native tokens to an address that has no balance yet.",
    response_model=FaucetResponseModel,
)
async def faucet(
    request: FaucetRequestModel,
    dispatch_core: DispatchCore = Depends(dependencies.get_dispatch_core),
) -> FaucetResponseModel:
    """Responds once the node accepted the transaction, before it is mined.

    Error codes:
    * 400 `invalid_address`, `non_zero_balance`
    * 500 `signing_failure`, `build_failure`
    * 502 `submission_rejected`
    * 503 `gateway_unavailable`, `insufficient_faucet_funds`
    * 504 `gateway_timeout`
    """
    return await faucet_service.execute(request, dispatch_core)


@router.get(
    "/transactions/{transaction_hash}",
    name="Faucet transaction status",
    description="Whether a faucet transaction has been included in a block.",
    response_model=TransactionStatusResponseModel,
)
async def transaction_status(
    transaction_hash: str,
    gateway: ChainGatewayRepository = Depends(
        dependencies.get_chain_gateway_repository
    ),
) -> TransactionStatusResponseModel:
    return await transaction_status_service.execute(transaction_hash, gateway)
