from datetime import datetime
from datetime import UTC

from pydantic import BaseModel, Field

from testnetfaucet import api_logger
from testnetfaucet.repository.chain_gateway_repository import ChainGatewayRepository
from testnetfaucet.service import error_responses

logger = api_logger.get()


class HealthResponseModel(BaseModel):
    status: str = Field(description="Always 'healthy', unhealthy is a 503")
    timestamp: str = Field(description="Server time, ISO 8601")


async def execute(gateway: ChainGatewayRepository) -> HealthResponseModel:
    if not await gateway.is_connected():
        logger.warning(f"Health check failed, chain RPC unreachable: {gateway.rpc_url}")
        raise error_responses.GatewayUnavailableAPIError()
    return HealthResponseModel(
        status="healthy",
        timestamp=datetime.now(UTC).isoformat(),
    )
