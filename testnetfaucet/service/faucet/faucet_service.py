from testnetfaucet import api_logger
from testnetfaucet.domain.faucet.dispatch_core import DispatchCore
from testnetfaucet.domain.faucet.entities import DispatchOutcome
from testnetfaucet.domain.faucet.entities import DispatchStatus
from testnetfaucet.domain.faucet.entities import FailureReason
from testnetfaucet.service import error_responses
from testnetfaucet.service.faucet.entities import FaucetRequestModel
from testnetfaucet.service.faucet.entities import FaucetResponseModel
from testnetfaucet.utils.timer import async_timer

logger = api_logger.get()


@async_timer("faucet_service.execute", logger=logger)
async def execute(
    request: FaucetRequestModel,
    dispatch_core: DispatchCore,
) -> FaucetResponseModel:
    """Send tokens to the requested address if it has no balance yet."""
    outcome = await dispatch_core.dispatch(request.address)
    if outcome.status == DispatchStatus.ACCEPTED:
        return FaucetResponseModel(transaction_hash=outcome.transaction_hash)
    raise to_api_error(outcome)


def to_api_error(outcome: DispatchOutcome) -> error_responses.APIErrorResponse:
    if outcome.status == DispatchStatus.REJECTED:
        return error_responses.NonZeroBalanceError()

    match outcome.reason:
        case FailureReason.INVALID_ADDRESS:
            return error_responses.InvalidAddressError()
        case FailureReason.GATEWAY_UNAVAILABLE:
            return error_responses.GatewayUnavailableAPIError(outcome.message)
        case FailureReason.TIMEOUT:
            return error_responses.GatewayTimeoutAPIError(outcome.message)
        case FailureReason.SUBMISSION_REJECTED:
            return error_responses.SubmissionRejectedAPIError(outcome.message)
        case FailureReason.INSUFFICIENT_FAUCET_FUNDS:
            return error_responses.InsufficientFaucetFundsError()
        case FailureReason.SIGNING_FAILURE:
            return error_responses.SigningFailureError()
        case FailureReason.BUILD_FAILURE:
            return error_responses.BuildFailureError(outcome.message)
    return error_responses.InternalServerAPIError()
