from testnetfaucet import api_logger
from testnetfaucet.domain.faucet import address as address_utils
from testnetfaucet.domain.faucet.entities import TransactionStatus
from testnetfaucet.repository.chain_gateway_repository import ChainGatewayRepository
from testnetfaucet.repository.chain_gateway_repository import GatewayTimeoutError
from testnetfaucet.repository.chain_gateway_repository import (
    GatewayUnavailableError,
)
from testnetfaucet.service import error_responses
from testnetfaucet.service.faucet.entities import TransactionStatusResponseModel

logger = api_logger.get()


async def execute(
    transaction_hash: str,
    gateway: ChainGatewayRepository,
) -> TransactionStatusResponseModel:
    """Second stage of a faucet transfer: has the accepted transaction been mined"""
    if not address_utils.is_transaction_hash(transaction_hash):
        raise error_responses.InvalidTransactionHashError(transaction_hash)

    try:
        receipt = await gateway.get_receipt(transaction_hash)
    except GatewayTimeoutError as e:
        raise error_responses.GatewayTimeoutAPIError() from e
    except GatewayUnavailableError as e:
        raise error_responses.GatewayUnavailableAPIError() from e

    if receipt is None:
        return TransactionStatusResponseModel(
            transaction_hash=transaction_hash,
            status=TransactionStatus.PENDING,
        )
    status = (
        TransactionStatus.SUCCESS
        if receipt.get("status") == 1
        else TransactionStatus.FAILED
    )
    return TransactionStatusResponseModel(
        transaction_hash=transaction_hash,
        status=status,
        block_number=receipt.get("blockNumber"),
    )
