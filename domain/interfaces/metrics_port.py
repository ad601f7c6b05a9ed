from typing_extensions import Protocol


class MetricsPort(Protocol):
    """Protocol for metrics operations."""

    def increment_payment_application(self, flow: str, outcome: str) -> None:
        """
        Increment the erp_payment_application_total counter.

        Args:
            flow: "mark_paid", "manual" or "reset"
            outcome: Settlement kind ("full", "partial", "exact", "excess", "reset") or "error"
        """
        ...

    def increment_schedule_generation(self, outcome: str) -> None:
        """
        Increment the erp_schedule_generation_total counter.

        Args:
            outcome: One of "generated", "skipped", "rejected" or "failed"
        """
        ...

    def increment_overdue_transition(self, outcome: str) -> None:
        """
        Increment the erp_overdue_transition_total counter.

        Args:
            outcome: "transitioned", "skipped" or "failed"
        """
        ...

    def increment_contract_liquidation(self) -> None:
        """Increment the erp_contract_liquidation_total counter."""
        ...
