"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from moneymaster.core.calculators import (
    CalculatorKind,
    UnknownCalculatorError,
    list_calculators,
    run_calculator,
)
from moneymaster.core.formatting import format_currency
from moneymaster.core.ping import get_ping_message
from moneymaster.core.summary import recent, summarize
from moneymaster.domain.outcomes import InputValidationError
from moneymaster.schemas.ping import PingResponse
from moneymaster.schemas.transactions import SummaryRequest, SummaryResponse

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    logger.warning("rejected %s: %d validation error(s)", request.path, exc.error_count())
    detail = exc.errors(include_url=False, include_context=False, include_input=False)
    return jsonify({"detail": detail}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(InputValidationError)
def _handle_input_error(exc: InputValidationError):
    logger.warning("rejected %s: %s", request.path, exc)
    return jsonify({"detail": exc.errors}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(UnknownCalculatorError)
def _handle_unknown_calculator(exc: UnknownCalculatorError):
    return jsonify({"detail": str(exc)}), HTTPStatus.NOT_FOUND


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message=get_ping_message())
    return jsonify(response.model_dump())


@api_bp.get("/calculators")
def calculators() -> Any:
    """List every calculator the API can run."""
    return jsonify([info.model_dump() for info in list_calculators()])


@api_bp.post("/calc/<kind>")
def calculate(kind: str) -> Any:
    """Run one calculator on the posted inputs."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False) or {}
    if kind == CalculatorKind.CURRENCY.value and isinstance(raw_payload, dict):
        settings = current_app.config["MONEYMASTER_SETTINGS"]
        raw_payload.setdefault("rates", settings.exchange_rates)

    result = run_calculator(kind, raw_payload)
    return jsonify(result.model_dump(mode="json"))


@api_bp.post("/summary")
def summary() -> Any:
    """Dashboard totals, category breakdowns and recent activity."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False) or {}
    payload = SummaryRequest.model_validate(raw_payload)
    totals = summarize(payload.transactions)

    formatted = {
        name: format_currency(getattr(totals, name), payload.currency, payload.privacyMode)
        for name in ("income", "expense", "balance")
    }
    response = SummaryResponse(
        **totals.model_dump(),
        formatted=formatted,
        recent=recent(payload.transactions),
    )
    return jsonify(response.model_dump(mode="json"))
