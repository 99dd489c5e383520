from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import UTC
from enum import Enum
from typing import Any
from typing import Dict
from typing import Optional
from uuid import UUID

from uuid_extensions import uuid7


class DispatchStatus(Enum):
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    FAILED = "FAILED"


class RejectionReason(Enum):
    # Policy decision, not an error
    NON_ZERO_BALANCE = "non_zero_balance"


class FailureReason(Enum):
    INVALID_ADDRESS = "invalid_address"
    GATEWAY_UNAVAILABLE = "gateway_unavailable"
    TIMEOUT = "gateway_timeout"
    SUBMISSION_REJECTED = "submission_rejected"
    SIGNING_FAILURE = "signing_failure"
    INSUFFICIENT_FAUCET_FUNDS = "insufficient_faucet_funds"
    BUILD_FAILURE = "build_failure"
    INTERNAL_ERROR = "internal_error"


class TransactionStatus(Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


@dataclass(frozen=True)
class FaucetConfig:
    rpc_url: str
    private_key: str
    # all amounts in wei
    amount_per_request: int
    gas_price: int
    gas_limit: int
    chain_id: Optional[int]
    gateway_timeout_seconds: float
    nonce_too_low_retries: int
    host: str
    port: int

    @property
    def max_transaction_cost(self) -> int:
        return self.amount_per_request + self.gas_price * self.gas_limit


@dataclass
class DispatchJob:
    """Transfer owned by the dispatch core until it reaches a terminal outcome."""

    recipient: str
    amount: int
    id: UUID = field(default_factory=uuid7)
    submitted_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    nonce: Optional[int] = None


@dataclass(frozen=True)
class UnsignedTransaction:
    chain_id: int
    nonce: int
    to: str
    value: int
    gas: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int

    def to_dict(self) -> Dict[str, Any]:
        """Transaction fields in the shape eth-account signs."""
        return {
            "type": 2,
            "chainId": self.chain_id,
            "nonce": self.nonce,
            "to": self.to,
            "value": self.value,
            "gas": self.gas,
            "maxFeePerGas": self.max_fee_per_gas,
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
        }


@dataclass(frozen=True)
class SignedTransaction:
    raw_transaction: bytes
    transaction_hash: str


@dataclass
class DispatchOutcome:
    status: DispatchStatus
    transaction_hash: Optional[str] = None
    reason: Optional[RejectionReason | FailureReason] = None
    message: Optional[str] = None
    job_id: Optional[UUID] = None

    @classmethod
    def accepted(cls, transaction_hash: str, job_id: Optional[UUID] = None):
        return cls(
            status=DispatchStatus.ACCEPTED,
            transaction_hash=transaction_hash,
            job_id=job_id,
        )

    @classmethod
    def rejected(cls, reason: RejectionReason, message: Optional[str] = None):
        return cls(status=DispatchStatus.REJECTED, reason=reason, message=message)

    @classmethod
    def failed(
        cls,
        reason: FailureReason,
        message: Optional[str] = None,
        job_id: Optional[UUID] = None,
    ):
        return cls(
            status=DispatchStatus.FAILED,
            reason=reason,
            message=message,
            job_id=job_id,
        )

    def is_accepted(self) -> bool:
        return self.status == DispatchStatus.ACCEPTED


@dataclass
class TransactionStatusResult:
    transaction_hash: str
    status: TransactionStatus
    block_number: Optional[int] = None
