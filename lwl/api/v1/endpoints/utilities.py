"""Stateless helpers: input validation, text selection, scoring and pricing."""
from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from lwl.core import currency, levels, text, validation
from lwl.schemas.utilities import (
    CompareRequest,
    CompareResponse,
    PriceRead,
    TextSelectionRequest,
    TextSelectionResponse,
    ValidateInputRequest,
    ValidateInputResponse,
)
from lwl.services.subscriptions import PLANS

router = APIRouter(tags=["utilities"])


@router.post("/validation/input", response_model=ValidateInputResponse)
def validate_input(payload: ValidateInputRequest) -> ValidateInputResponse:
    result = validation.validate_input(
        payload.text,
        max_length=payload.max_length,
        allow_html=payload.allow_html,
        required=payload.required,
    )
    sanitized = validation.sanitize_input(payload.text) if result.is_valid else ""
    return ValidateInputResponse(is_valid=result.is_valid, error=result.error, sanitized=sanitized)


@router.post("/utilities/text-selection", response_model=TextSelectionResponse)
def analyze_selection(payload: TextSelectionRequest) -> TextSelectionResponse:
    info = text.analyze_text_selection(payload.text)
    return TextSelectionResponse(**asdict(info), recommendation=text.selection_recommendation(info))


@router.post("/utilities/compare", response_model=CompareResponse)
def compare(payload: CompareRequest) -> CompareResponse:
    result = text.compare_texts(payload.expected, payload.actual)
    return CompareResponse(accuracy=result.accuracy, differences=result.differences)


@router.get("/utilities/pricing", response_model=list[PriceRead])
def pricing(
    locale: Optional[str] = Query(default=None, max_length=35),
    currency_code: Optional[str] = Query(default=None, alias="currency", max_length=3),
) -> list[PriceRead]:
    """Plan prices in the requested currency, or the one implied by ``locale``."""

    code = (currency_code or currency.currency_for_locale(locale)).upper()
    details = currency.CURRENCIES.get(code)
    if details is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unsupported currency: {code}")

    prices = []
    for plan_id, plan in sorted(PLANS.items(), key=lambda item: item[1].unit_amount):
        amount = currency.convert_price(plan.unit_amount / 100, code)
        prices.append(
            PriceRead(
                plan_id=plan_id,
                name=plan.name,
                interval=plan.interval,
                interval_count=plan.interval_count,
                currency=code,
                symbol=details.symbol,
                amount=amount,
                formatted=currency.format_amount(amount, code),
            )
        )
    return prices


@router.get("/levels", response_model=list[dict])
def list_levels() -> list[dict]:
    return [asdict(info) for info in levels.LANGUAGE_LEVELS]
