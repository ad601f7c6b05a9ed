"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    code = "domain_error"


class NotFoundError(DomainException):
    """Contract or payment does not exist"""

    code = "not_found"

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} {entity_id} not found")


class InvalidAmountError(DomainException):
    """Amount is not a finite, correctly signed money value"""

    code = "invalid_amount"


class InsufficientBalanceError(DomainException):
    """Requested positive balance usage exceeds the available credit"""

    code = "insufficient_balance"


class AlreadyPaidError(DomainException):
    """Payment is already settled"""

    code = "already_paid"

    def __init__(self, payment_id: str):
        self.payment_id = payment_id
        super().__init__(f"Payment {payment_id} is already marked as paid")


class InvalidPaymentStateError(DomainException):
    """Operation is not allowed for the payment's current status"""

    code = "invalid_payment_state"


class ScheduleGenerationFailedError(DomainException):
    """Installment schedule could not be persisted; partial rows were removed"""

    code = "schedule_generation_failed"


class StaleContractError(DomainException):
    """Contract balances changed since they were read (optimistic lock lost)"""

    code = "stale_contract"

    def __init__(self, contract_id: str, expected_version: int):
        self.contract_id = contract_id
        self.expected_version = expected_version
        super().__init__(
            f"Contract {contract_id} was modified concurrently (expected version {expected_version})"
        )


class InvalidPaymentTypeError(DomainException):
    """Payment type is not allowed for the requested operation"""

    code = "invalid_payment_type"


class ScheduleAlreadyExistsError(DomainException):
    """Contract already has payments; a schedule is generated only once"""

    code = "schedule_already_exists"

    def __init__(self, contract_id: str, payment_count: int):
        self.contract_id = contract_id
        self.payment_count = payment_count
        super().__init__(
            f"Contract {contract_id} already has {payment_count} payments; schedule not generated"
        )


class InvalidContractStatusError(DomainException):
    """Requested contract status cannot be set by an administrative update"""

    code = "invalid_contract_status"
