from unittest.mock import AsyncMock

import pytest

from testnetfaucet.domain.faucet.dispatch_core import DispatchCore
from testnetfaucet.domain.faucet.entities import DispatchOutcome
from testnetfaucet.domain.faucet.entities import FailureReason
from testnetfaucet.domain.faucet.entities import RejectionReason
from testnetfaucet.service import error_responses
from testnetfaucet.service.faucet import faucet_service
from testnetfaucet.service.faucet.entities import FaucetRequestModel

ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
TX_HASH = "0x" + "ab" * 32


@pytest.fixture
def request_model():
    return FaucetRequestModel(address=ADDRESS)


@pytest.fixture
def mock_dispatch_core():
    return AsyncMock(spec=DispatchCore)


async def test_execute_success(request_model, mock_dispatch_core):
    mock_dispatch_core.dispatch.return_value = DispatchOutcome.accepted(TX_HASH)

    result = await faucet_service.execute(request_model, mock_dispatch_core)

    assert result.transaction_hash == TX_HASH
    mock_dispatch_core.dispatch.assert_called_once_with(ADDRESS)


async def test_execute_non_zero_balance(request_model, mock_dispatch_core):
    mock_dispatch_core.dispatch.return_value = DispatchOutcome.rejected(
        RejectionReason.NON_ZERO_BALANCE
    )

    with pytest.raises(error_responses.NonZeroBalanceError) as e:
        await faucet_service.execute(request_model, mock_dispatch_core)

    assert e.value.to_status_code() == 400
    assert e.value.to_code() == "non_zero_balance"


@pytest.mark.parametrize(
    "reason,expected_error,expected_status",
    [
        (FailureReason.INVALID_ADDRESS, error_responses.InvalidAddressError, 400),
        (
            FailureReason.GATEWAY_UNAVAILABLE,
            error_responses.GatewayUnavailableAPIError,
            503,
        ),
        (FailureReason.TIMEOUT, error_responses.GatewayTimeoutAPIError, 504),
        (
            FailureReason.SUBMISSION_REJECTED,
            error_responses.SubmissionRejectedAPIError,
            502,
        ),
        (
            FailureReason.INSUFFICIENT_FAUCET_FUNDS,
            error_responses.InsufficientFaucetFundsError,
            503,
        ),
        (FailureReason.SIGNING_FAILURE, error_responses.SigningFailureError, 500),
        (FailureReason.BUILD_FAILURE, error_responses.BuildFailureError, 500),
        (FailureReason.INTERNAL_ERROR, error_responses.InternalServerAPIError, 500),
    ],
)
async def test_execute_failures(
    reason, expected_error, expected_status, request_model, mock_dispatch_core
):
    mock_dispatch_core.dispatch.return_value = DispatchOutcome.failed(
        reason, message="details"
    )

    with pytest.raises(expected_error) as e:
        await faucet_service.execute(request_model, mock_dispatch_core)

    assert e.value.to_status_code() == expected_status


def test_submission_rejected_keeps_node_reason():
    error = faucet_service.to_api_error(
        DispatchOutcome.failed(FailureReason.SUBMISSION_REJECTED, "replacement underpriced")
    )

    assert error.to_code() == "submission_rejected"
    assert "replacement underpriced" in error.to_message()


async def test_execute_error_propagation(request_model, mock_dispatch_core):
    test_error = ValueError("Test error")
    mock_dispatch_core.dispatch.side_effect = test_error

    with pytest.raises(ValueError) as exc_info:
        await faucet_service.execute(request_model, mock_dispatch_core)

    assert exc_info.value is test_error


@pytest.mark.parametrize(
    "reason,message",
    [
        (FailureReason.GATEWAY_UNAVAILABLE, "get_balance failed: connection refused"),
        (FailureReason.TIMEOUT, "get_next_nonce timed out after 10.0s"),
    ],
)
def test_gateway_errors_name_the_failed_stage(reason, message):
    error = faucet_service.to_api_error(DispatchOutcome.failed(reason, message))

    assert message in error.to_message()
