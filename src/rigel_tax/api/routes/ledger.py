"""Trial balance, VAT and tax report endpoints."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from rigel_tax.api.dependencies import AppSettings
from rigel_tax.api.schemas import (
    LedgerPostingSchema,
    TaxReportRequest,
    TaxReportResponse,
    TrialBalanceRequest,
    TrialBalanceResponse,
    VatAmountRequest,
    VatAmountResponse,
    VatEstimateRequest,
    VatEstimateResponse,
)
from rigel_tax.calculators.ledger import (
    add_vat,
    build_tax_report,
    build_trial_balance,
    estimate_vat,
    extract_vat,
    render_trial_balance_lines,
)
from rigel_tax.calculators.types import (
    CorporateTaxBracket,
    LedgerAccount,
    LedgerPosting,
    TrialBalance,
)

router = APIRouter(prefix="/ledger", tags=["ledger"])


def _to_postings(postings: list[LedgerPostingSchema]) -> list[LedgerPosting]:
    return [
        LedgerPosting(
            account=LedgerAccount(**p.account.model_dump()),
            debit=p.debit,
            credit=p.credit,
            entry_type=p.entry_type,
        )
        for p in postings
    ]


def _trial_balance(payload: TrialBalanceRequest) -> TrialBalance:
    accounts = (
        [LedgerAccount(**a.model_dump()) for a in payload.accounts]
        if payload.accounts is not None
        else None
    )
    return build_trial_balance(
        _to_postings(payload.postings),
        accounts=accounts,
        exclude_adjustments=payload.exclude_adjustments,
    )


@router.post("/trial-balance", response_model=TrialBalanceResponse)
async def trial_balance(payload: TrialBalanceRequest) -> TrialBalanceResponse:
    """Aggregate postings into trial balance rows and totals."""
    return TrialBalanceResponse.model_validate(_trial_balance(payload))


@router.post("/trial-balance/report", response_class=PlainTextResponse)
async def trial_balance_report(payload: TrialBalanceRequest) -> str:
    """Human-readable trial balance report, one line per account plus totals."""
    lines = ["Trial Balance", "", *render_trial_balance_lines(_trial_balance(payload))]
    return "\n".join(lines) + "\n"


@router.post("/vat-estimate", response_model=VatEstimateResponse)
async def vat_estimate(
    payload: VatEstimateRequest,
    settings: AppSettings,
) -> VatEstimateResponse:
    """Estimate VAT due from revenue and expense aggregates."""
    vat_rate = payload.vat_rate if payload.vat_rate is not None else settings.default_vat_rate
    estimate = estimate_vat(payload.revenue, payload.expenses, vat_rate)
    return VatEstimateResponse(
        vat_rate=vat_rate,
        output_vat=estimate.output_vat,
        input_vat=estimate.input_vat,
        vat_due=estimate.vat_due,
    )


@router.post("/vat", response_model=VatAmountResponse)
async def vat_amount(
    payload: VatAmountRequest,
    settings: AppSettings,
) -> VatAmountResponse:
    """Add VAT to a net amount or extract it from a VAT-inclusive amount."""
    vat_rate = payload.vat_rate if payload.vat_rate is not None else settings.default_vat_rate

    if payload.mode == "add":
        vat, gross = add_vat(payload.amount, vat_rate)
        net = payload.amount
    else:
        vat, net = extract_vat(payload.amount, vat_rate)
        gross = payload.amount

    return VatAmountResponse(
        vat_rate=vat_rate,
        net_amount=net,
        vat_amount=vat,
        gross_amount=gross,
    )


@router.post("/tax-report", response_model=TaxReportResponse)
async def tax_report(
    payload: TaxReportRequest,
    settings: AppSettings,
) -> TaxReportResponse:
    """Revenue, expenses, VAT due and corporate tax derived from postings."""
    vat_rate = payload.vat_rate if payload.vat_rate is not None else settings.default_vat_rate
    brackets = (
        [CorporateTaxBracket(threshold=b.threshold, rate=b.rate) for b in payload.corp_tax_brackets]
        if payload.corp_tax_brackets
        else None
    )
    report = build_tax_report(
        _to_postings(payload.postings),
        vat_rate,
        brackets,
        corporate_tax_rate=settings.default_corporate_tax_rate,
    )
    return TaxReportResponse.model_validate(report)
