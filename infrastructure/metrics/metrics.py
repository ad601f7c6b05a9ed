# infrastructure/metrics/metrics.py
from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

erp_payment_application_total = Counter(
    "erp_payment_application_total",
    "Installment settlements and resets",
    ["flow", "outcome"]  # flow: mark_paid|manual|reset, outcome: full|partial|exact|excess|reset|error
)

erp_schedule_generation_total = Counter(
    "erp_schedule_generation_total",
    "Installment schedule generations",
    ["outcome"]  # generated|skipped|rejected|failed
)

erp_overdue_transition_total = Counter(
    "erp_overdue_transition_total",
    "Pending installments moved to overdue by the daily sweep",
    ["outcome"]  # transitioned|skipped|failed
)

erp_contract_liquidation_total = Counter(
    "erp_contract_liquidation_total",
    "Contracts automatically marked liquidado"
)


def metrics_endpoint():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
