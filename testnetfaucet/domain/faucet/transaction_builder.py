from testnetfaucet.domain.faucet.entities import UnsignedTransaction

# Plain value transfer, anything lower is rejected by the node
MIN_TRANSFER_GAS = 21000


def validate_parameters(amount: int, gas_price: int, gas_limit: int) -> None:
    """
    Raises ValueError for parameters that can never produce a valid transfer.
    Called once while loading configuration, not per request.
    """
    if amount <= 0:
        raise ValueError(f"Transfer amount must be positive, got {amount}")
    if gas_price <= 0:
        raise ValueError(f"Gas price must be positive, got {gas_price}")
    if gas_limit < MIN_TRANSFER_GAS:
        raise ValueError(
            f"Gas limit must be at least {MIN_TRANSFER_GAS}, got {gas_limit}"
        )


# pylint: disable=too-many-arguments
def build_transaction(
    recipient: str,
    amount: int,
    nonce: int,
    gas_price: int,
    gas_limit: int,
    chain_id: int,
) -> UnsignedTransaction:
    if nonce < 0:
        raise ValueError(f"Nonce must not be negative, got {nonce}")
    # The configured gas price is used as both the fee cap and the tip
    return UnsignedTransaction(
        chain_id=chain_id,
        nonce=nonce,
        to=recipient,
        value=amount,
        gas=gas_limit,
        max_fee_per_gas=gas_price,
        max_priority_fee_per_gas=gas_price,
    )
