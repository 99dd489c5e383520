from fastapi import APIRouter, Depends

from testnetfaucet import dependencies
from testnetfaucet.repository.chain_gateway_repository import ChainGatewayRepository
from testnetfaucet.service.health import health_service
from testnetfaucet.service.health.health_service import HealthResponseModel

TAG = "Health"
router = APIRouter(prefix="/health")
router.tags = [TAG]


@router.get(
    "",
    name="Health",
    description="200 when the chain RPC is reachable, 503 otherwise.",
    response_model=HealthResponseModel,
)
async def health(
    gateway: ChainGatewayRepository = Depends(
        dependencies.get_chain_gateway_repository
    ),
) -> HealthResponseModel:
    return await health_service.execute(gateway)
