from fastapi import APIRouter, Depends, HTTPException, status
from application.service.add_complementary_payment import AddComplementaryPaymentService
from application.service.apply_manual_payment import ApplyManualPaymentService
from application.service.generate_schedule import GenerateScheduleService
from application.service.liquidation import ContractLiquidationService
from application.service.mark_payment_paid import MarkPaymentPaidService
from application.service.reset_payment import ResetPaymentService
from application.service.sweep_overdue import SweepOverdueService
from application.service.update_contract_status import UpdateContractStatusService
from app.dependencies import LedgerContext, get_ledger_context
from app.schemas.ledger_schema import (
    ComplementaryPaymentCreate,
    ContractResponse,
    ContractStatusUpdate,
    LiquidationResponse,
    ManualPaymentCreate,
    PaymentApplicationResponse,
    PaymentResponse,
    ScheduleCreate,
    ScheduleResponse,
    SweepResponse,
)
from domain.exceptions import (
    AlreadyPaidError,
    DomainException,
    InsufficientBalanceError,
    InvalidContractStatusError,
    InvalidAmountError,
    InvalidPaymentStateError,
    InvalidPaymentTypeError,
    NotFoundError,
    ScheduleAlreadyExistsError,
    ScheduleGenerationFailedError,
    StaleContractError,
)

router = APIRouter(prefix="/v1")

STATUS_BY_ERROR = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidAmountError: status.HTTP_400_BAD_REQUEST,
    InsufficientBalanceError: status.HTTP_400_BAD_REQUEST,
    AlreadyPaidError: status.HTTP_400_BAD_REQUEST,
    InvalidPaymentStateError: status.HTTP_400_BAD_REQUEST,
    InvalidPaymentTypeError: status.HTTP_400_BAD_REQUEST,
    InvalidContractStatusError: status.HTTP_400_BAD_REQUEST,
    StaleContractError: status.HTTP_409_CONFLICT,
    ScheduleAlreadyExistsError: status.HTTP_409_CONFLICT,
    ScheduleGenerationFailedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(error: DomainException) -> HTTPException:
    status_code = STATUS_BY_ERROR.get(type(error), status.HTTP_400_BAD_REQUEST)
    return HTTPException(
        status_code=status_code,
        detail={"error": error.code, "message": str(error)},
    )


@router.post("/contracts/{contract_id}/schedule")
async def generate_schedule(
    contract_id: str,
    payload: ScheduleCreate,
    ctx: LedgerContext = Depends(get_ledger_context),
) -> ScheduleResponse:
    """
    Generate the installment schedule of a persisted contract.

    Down payment (if any) is due on the start date; the rest is split into
    monthly installments, cent-exact, remainder on the first ones. A contract
    that already has payments is rejected with 409.
    """
    try:
        contract = await ctx.contract_repo.get_contract(contract_id)
        if contract is None:
            raise NotFoundError("contract", contract_id)
        srv = GenerateScheduleService(
            contract_repo=ctx.contract_repo,
            payment_repo=ctx.payment_repo,
            unit_of_work=ctx.unit_of_work,
            calendar=ctx.calendar,
            metrics_port=ctx.metrics_port,
            logging_port=ctx.logging_port,
        )
        payments = await srv.execute(contract, payment_method=payload.payment_method)
    except DomainException as e:
        raise to_http_exception(e)

    return ScheduleResponse(
        contract_id=contract_id,
        installments=[PaymentResponse.from_domain(p) for p in payments],
    )


@router.post("/contracts/{contract_id}/complementary")
async def add_complementary_payment(
    contract_id: str,
    payload: ComplementaryPaymentCreate,
    ctx: LedgerContext = Depends(get_ledger_context),
) -> PaymentResponse:
    srv = AddComplementaryPaymentService(
        contract_repo=ctx.contract_repo,
        payment_repo=ctx.payment_repo,
        unit_of_work=ctx.unit_of_work,
        calendar=ctx.calendar,
        logging_port=ctx.logging_port,
    )
    try:
        payment = await srv.execute(
            contract_id,
            amount=payload.amount,
            due_date=payload.due_date,
            payment_type=payload.payment_type,
            payment_method=payload.payment_method,
            notes=payload.notes,
        )
    except DomainException as e:
        raise to_http_exception(e)
    return PaymentResponse.from_domain(payment)


@router.post("/contracts/{contract_id}/status")
async def update_contract_status(
    contract_id: str,
    payload: ContractStatusUpdate,
    ctx: LedgerContext = Depends(get_ledger_context),
) -> ContractResponse:
    """Administrative status change: ativo, renegociado, cancelado or jurídico."""
    srv = UpdateContractStatusService(ctx.contract_repo, ctx.unit_of_work, logging_port=ctx.logging_port)
    try:
        contract = await srv.execute(contract_id, payload.status)
    except DomainException as e:
        raise to_http_exception(e)
    return ContractResponse.from_domain(contract)


@router.post("/contracts/{contract_id}/liquidation-check")
async def liquidation_check(
    contract_id: str,
    ctx: LedgerContext = Depends(get_ledger_context),
) -> LiquidationResponse:
    """Idempotent: mark the contract liquidado if every installment is paid."""
    srv = ContractLiquidationService(
        ctx.contract_repo, ctx.payment_repo, unit_of_work=ctx.unit_of_work, metrics_port=ctx.metrics_port
    )
    try:
        liquidated = await srv.execute(contract_id)
    except DomainException as e:
        raise to_http_exception(e)
    return LiquidationResponse(contract_id=contract_id, liquidated=liquidated)


@router.post("/payments/{payment_id}/mark-paid")
async def mark_payment_paid(
    payment_id: str,
    ctx: LedgerContext = Depends(get_ledger_context),
) -> PaymentApplicationResponse:
    """Settle an installment at its scheduled amount."""
    srv = MarkPaymentPaidService(
        contract_repo=ctx.contract_repo,
        payment_repo=ctx.payment_repo,
        unit_of_work=ctx.unit_of_work,
        calendar=ctx.calendar,
        metrics_port=ctx.metrics_port,
        logging_port=ctx.logging_port,
    )
    try:
        result = await srv.execute(payment_id)
    except DomainException as e:
        raise to_http_exception(e)
    return PaymentApplicationResponse.from_result(result)


@router.post("/payments/{payment_id}/manual")
async def apply_manual_payment(
    payment_id: str,
    payload: ManualPaymentCreate,
    ctx: LedgerContext = Depends(get_ledger_context),
) -> PaymentApplicationResponse:
    """
    Settle an installment with an explicit amount.

    Paying less records the shortfall as contract debt; paying more clears
    debt first and keeps the rest as credit.
    """
    srv = ApplyManualPaymentService(
        contract_repo=ctx.contract_repo,
        payment_repo=ctx.payment_repo,
        unit_of_work=ctx.unit_of_work,
        calendar=ctx.calendar,
        metrics_port=ctx.metrics_port,
        logging_port=ctx.logging_port,
    )
    try:
        result = await srv.execute(
            payment_id,
            amount=payload.amount,
            use_positive_balance=payload.use_positive_balance,
            payment_method=payload.payment_method,
        )
    except DomainException as e:
        raise to_http_exception(e)
    return PaymentApplicationResponse.from_result(result)


@router.post("/payments/{payment_id}/reset")
async def reset_payment(
    payment_id: str,
    ctx: LedgerContext = Depends(get_ledger_context),
) -> PaymentApplicationResponse:
    srv = ResetPaymentService(
        contract_repo=ctx.contract_repo,
        payment_repo=ctx.payment_repo,
        unit_of_work=ctx.unit_of_work,
        metrics_port=ctx.metrics_port,
        logging_port=ctx.logging_port,
    )
    try:
        result = await srv.execute(payment_id)
    except DomainException as e:
        raise to_http_exception(e)
    return PaymentApplicationResponse.from_result(result)


@router.post("/payments/overdue/sweep")
async def sweep_overdue(ctx: LedgerContext = Depends(get_ledger_context)) -> SweepResponse:
    srv = SweepOverdueService(
        payment_repo=ctx.payment_repo,
        unit_of_work=ctx.unit_of_work,
        calendar=ctx.calendar,
        metrics_port=ctx.metrics_port,
        logging_port=ctx.logging_port,
    )
    report = await srv.execute()
    return SweepResponse.from_report(report)
