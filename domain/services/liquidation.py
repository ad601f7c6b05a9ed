from domain.entities import Contract, ContractStatus, Payment


def should_liquidate(contract: Contract, payments: list[Payment]) -> bool:
    """
    A contract is liquidated once every one of its payments is paid.

    Returns False when the contract is already liquidated or has no payments,
    so calling it repeatedly never triggers a second transition.
    """
    if contract.status == ContractStatus.LIQUIDADO or not payments:
        return False
    return all(p.is_paid for p in payments)
