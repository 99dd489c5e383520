from typing import Optional

from pydantic import BaseModel, Field

from testnetfaucet.domain.faucet.entities import TransactionStatus


class FaucetRequestModel(BaseModel):
    """Request model for faucet request"""

    address: str = Field(
        description="Address to receive tokens, 0x prefixed hex",
    )


class FaucetResponseModel(BaseModel):
    """Response model for an accepted faucet request"""

    transaction_hash: str = Field(
        description="Hash of the submitted transaction. Accepted by the node, not yet final.",
    )


class TransactionStatusResponseModel(BaseModel):
    transaction_hash: str = Field(description="Hash of the transaction")
    status: TransactionStatus = Field(
        description="PENDING until the transaction is included in a block",
    )
    block_number: Optional[int] = Field(
        default=None,
        description="Block the transaction was included in",
    )
