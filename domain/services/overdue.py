from datetime import date

from domain.entities import Payment, PaymentStatus


def is_overdue(payment: Payment, today: date) -> bool:
    return payment.status == PaymentStatus.PENDING and payment.due_date < today


def compute_overdue_transitions(payments: list[Payment], today: date) -> list[str]:
    """Ids of pending payments whose due date is before ``today``."""
    return [p.id for p in payments if is_overdue(p, today)]
