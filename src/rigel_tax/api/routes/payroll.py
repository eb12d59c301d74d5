"""Payroll tax endpoints (PAYE, UIF, annual income tax)."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from rigel_tax.api.dependencies import AppSettings, TaxTables
from rigel_tax.api.schemas import (
    ErrorResponse,
    IncomeTaxRequest,
    IncomeTaxResponse,
    PayrollCalculateRequest,
    PayrollCalculateResponse,
    TaxTableResponse,
)
from rigel_tax.calculators.payroll_tax import PayrollTaxCalculator, calculate_company_tax
from rigel_tax.calculators.types import PayrollEntry

router = APIRouter(prefix="/payroll", tags=["payroll"])


@router.post(
    "/calculate",
    response_model=PayrollCalculateResponse,
    status_code=status.HTTP_200_OK,
    responses={404: {"model": ErrorResponse}},
)
async def calculate_payroll(
    payload: PayrollCalculateRequest,
    tables: TaxTables,
    settings: AppSettings,
) -> PayrollCalculateResponse:
    """Compute PAYE, UIF and net salary for one monthly payroll entry."""
    tax_year = payload.tax_year or settings.default_tax_year
    table = await tables.get_table(tax_year)

    result = PayrollTaxCalculator(table).calculate_payroll(
        PayrollEntry(
            basic_salary=payload.basic_salary,
            allowances=payload.allowances,
            overtime_pay=payload.overtime_pay,
            medical_aid=payload.medical_aid,
            pension_fund=payload.pension_fund,
        )
    )

    return PayrollCalculateResponse(
        tax_year=tax_year,
        gross_salary=result.gross_salary,
        paye_tax=result.paye_tax,
        uif=result.uif,
        medical_aid=result.medical_aid,
        pension_fund=result.pension_fund,
        total_deductions=result.total_deductions,
        net_salary=result.net_salary,
    )


@router.post(
    "/income-tax",
    response_model=IncomeTaxResponse,
    responses={404: {"model": ErrorResponse}},
)
async def calculate_income_tax(
    payload: IncomeTaxRequest,
    tables: TaxTables,
    settings: AppSettings,
) -> IncomeTaxResponse:
    """Annual income tax for an individual (with age rebates) or a company."""
    tax_year = payload.tax_year or settings.default_tax_year

    if payload.entity_type == "company":
        tax = calculate_company_tax(payload.annual_income, settings.default_corporate_tax_rate)
    else:
        table = await tables.get_table(tax_year)
        tax = PayrollTaxCalculator(table).calculate_annual_tax(
            payload.annual_income, payload.age_group
        )

    return IncomeTaxResponse(
        tax_year=tax_year,
        entity_type=payload.entity_type,
        tax=tax,
        net_income=payload.annual_income - tax,
    )


@router.get(
    "/tax-tables/{tax_year}",
    response_model=TaxTableResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_tax_table(
    tax_year: Annotated[int, Path(ge=1990, le=2100)],
    tables: TaxTables,
) -> TaxTableResponse:
    """Brackets, rebates and UIF parameters in force for a tax year."""
    table = await tables.get_table(tax_year)
    return TaxTableResponse.model_validate(table)
