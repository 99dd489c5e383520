from typing import Optional

from starlette import status


class APIErrorResponse(Exception):
    """Base class for other exceptions"""

    def __init__(self):
        pass

    def to_status_code(self) -> int:
        raise NotImplementedError

    def to_code(self) -> str:
        raise NotImplementedError

    def to_message(self) -> str:
        raise NotImplementedError

    def __str__(self):
        return f"{self.to_code()}: {self.to_message()}"


def _with_extra(message: str, message_extra: Optional[str]) -> str:
    if message_extra:
        return f"{message} - {message_extra}"
    return message


class InvalidAddressError(APIErrorResponse):
    def __init__(self, message_extra: Optional[str] = None):
        self.message_extra = message_extra

    def to_status_code(self) -> int:
        return status.HTTP_400_BAD_REQUEST

    def to_code(self) -> str:
        return "invalid_address"

    def to_message(self) -> str:
        return _with_extra("Invalid address", self.message_extra)


class InvalidTransactionHashError(APIErrorResponse):
    def __init__(self, transaction_hash: str):
        self.transaction_hash = transaction_hash

    def to_status_code(self) -> int:
        return status.HTTP_400_BAD_REQUEST

    def to_code(self) -> str:
        return "invalid_transaction_hash"

    def to_message(self) -> str:
        return f"Invalid transaction hash: {self.transaction_hash}"


class NonZeroBalanceError(APIErrorResponse):
    """Policy rejection: only empty addresses are funded"""

    def __init__(self):
        pass

    def to_status_code(self) -> int:
        return status.HTTP_400_BAD_REQUEST

    def to_code(self) -> str:
        return "non_zero_balance"

    def to_message(self) -> str:
        return "Receiver already has a balance greater than 0"


class GatewayUnavailableAPIError(APIErrorResponse):
    def __init__(self, message_extra: Optional[str] = None):
        self.message_extra = message_extra

    def to_status_code(self) -> int:
        return status.HTTP_503_SERVICE_UNAVAILABLE

    def to_code(self) -> str:
        return "gateway_unavailable"

    def to_message(self) -> str:
        return _with_extra("Chain RPC is unavailable", self.message_extra)


class GatewayTimeoutAPIError(APIErrorResponse):
    def __init__(self, message_extra: Optional[str] = None):
        self.message_extra = message_extra

    def to_status_code(self) -> int:
        return status.HTTP_504_GATEWAY_TIMEOUT

    def to_code(self) -> str:
        return "gateway_timeout"

    def to_message(self) -> str:
        return _with_extra("Chain RPC timed out", self.message_extra)


class SubmissionRejectedAPIError(APIErrorResponse):
    def __init__(self, message_extra: Optional[str] = None):
        self.message_extra = message_extra

    def to_status_code(self) -> int:
        return status.HTTP_502_BAD_GATEWAY

    def to_code(self) -> str:
        return "submission_rejected"

    def to_message(self) -> str:
        return _with_extra("Node rejected the transaction", self.message_extra)


class InsufficientFaucetFundsError(APIErrorResponse):
    def __init__(self):
        pass

    def to_status_code(self) -> int:
        return status.HTTP_503_SERVICE_UNAVAILABLE

    def to_code(self) -> str:
        return "insufficient_faucet_funds"

    def to_message(self) -> str:
        return "Faucet balance is too low, try again later."


class SigningFailureError(APIErrorResponse):
    def __init__(self):
        pass

    def to_status_code(self) -> int:
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_code(self) -> str:
        return "signing_failure"

    def to_message(self) -> str:
        return "Failed to sign the transaction."


class BuildFailureError(APIErrorResponse):
    def __init__(self, message_extra: Optional[str] = None):
        self.message_extra = message_extra

    def to_status_code(self) -> int:
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_code(self) -> str:
        return "build_failure"

    def to_message(self) -> str:
        return _with_extra("Failed to build the transaction", self.message_extra)


class InternalServerAPIError(APIErrorResponse):
    """Raised when an internal server error occurs"""

    def __init__(self):
        pass

    def to_status_code(self) -> int:
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_code(self) -> str:
        return "internal_server_error"

    def to_message(self) -> str:
        return "The request could not be completed due to an internal server error."
