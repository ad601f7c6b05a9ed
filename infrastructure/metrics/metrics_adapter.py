"""
Metrics adapter that implements MetricsPort protocol.

Increments the Prometheus counters served on /metrics.
"""
from domain.interfaces import MetricsPort
from infrastructure.metrics.metrics import (
    erp_contract_liquidation_total,
    erp_overdue_transition_total,
    erp_payment_application_total,
    erp_schedule_generation_total,
)


class MetricsAdapter(MetricsPort):

    def increment_payment_application(self, flow: str, outcome: str) -> None:
        erp_payment_application_total.labels(flow=flow, outcome=outcome).inc()

    def increment_schedule_generation(self, outcome: str) -> None:
        erp_schedule_generation_total.labels(outcome=outcome).inc()

    def increment_overdue_transition(self, outcome: str) -> None:
        erp_overdue_transition_total.labels(outcome=outcome).inc()

    def increment_contract_liquidation(self) -> None:
        erp_contract_liquidation_total.inc()
