"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from retirement_calculator.constants import GLIDEPATH_PRESETS, GLIDEPATH_TEMPLATES
from retirement_calculator.core.compounding import (
    aggregate_by_year,
    project_balance,
    size_contribution,
)
from retirement_calculator.core.simulation import simulate_glidepath
from retirement_calculator.domain.errors import GlidepathError, GlidepathValidationError
from retirement_calculator.domain.validation import validate_glidepath_inputs
from retirement_calculator.schemas.compounding import (
    ContributionRequest,
    ProjectionRequest,
    ProjectionResponse,
)
from retirement_calculator.schemas.glidepath import GlidepathRequest, GlidepathResponse

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return (
        jsonify({"detail": exc.errors(include_url=False, include_context=False)}),
        HTTPStatus.UNPROCESSABLE_ENTITY,
    )


@api_bp.errorhandler(GlidepathValidationError)
def _handle_glidepath_validation_error(exc: GlidepathValidationError):
    logger.info("rejected glidepath request: %s", exc.message)
    return (
        jsonify(
            {
                "error": exc.errors,
                "issues": [
                    {"code": issue.code, "field": issue.field, "message": issue.message}
                    for issue in exc.issues
                ],
            }
        ),
        HTTPStatus.BAD_REQUEST,
    )


@api_bp.errorhandler(GlidepathError)
def _handle_glidepath_error(exc: GlidepathError):
    logger.info("rejected request: %s", exc.message)
    return jsonify(exc.to_dict()), HTTPStatus.BAD_REQUEST


def _validated_glidepath_request() -> tuple:
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = GlidepathRequest.model_validate(raw_payload)
    validation = validate_glidepath_inputs(
        payload.initial_balance,
        payload.contribution_amount,
        payload.start_age,
        payload.end_age,
        payload.glidepath,
        payload.contribution_frequency,
        payload.compounding_frequency,
        payload.contribution_timing,
    )
    return payload, validation


def _check_simulation_length(years: float, field: str) -> None:
    max_years = current_app.config["MAX_SIMULATION_YEARS"]
    if years > max_years:
        raise GlidepathError(
            f"Simulations are limited to {max_years} years", field=field, value=years
        )


@api_bp.get("/presets")
def presets() -> Any:
    """Named glidepath configurations ready to submit to /calc/glidepath."""
    return jsonify({name: config.model_dump() for name, config in GLIDEPATH_PRESETS.items()})


@api_bp.get("/templates")
def templates() -> Any:
    """Starting-point glidepath configs grouped by risk level."""
    return jsonify(
        {
            risk: {mode: config.model_dump() for mode, config in configs.items()}
            for risk, configs in GLIDEPATH_TEMPLATES.items()
        }
    )


@api_bp.post("/calc/contribution")
def contribution() -> Any:
    """Per-period contribution needed to reach a target balance."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = ContributionRequest.model_validate(raw_payload)
    result = size_contribution(
        payload.starting_balance,
        payload.desired_balance,
        payload.years,
        payload.annual_rate,
        payload.contribution_frequency,
        payload.compounding_frequency,
        payload.inflation_rate,
    )
    return jsonify(result.model_dump())


@api_bp.post("/calc/projection")
def projection() -> Any:
    """Fixed-rate projection with the period ledger and yearly rollup."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = ProjectionRequest.model_validate(raw_payload)
    _check_simulation_length(payload.years, "years")
    result = project_balance(
        payload.initial_balance,
        payload.contribution_amount,
        payload.years,
        payload.annual_rate,
        payload.contribution_frequency,
        payload.compounding_frequency,
    )
    response = ProjectionResponse(**result.model_dump(), yearly=aggregate_by_year(result))
    return jsonify(response.model_dump())


@api_bp.post("/calc/glidepath")
def glidepath() -> Any:
    """Month-by-month glidepath simulation; validation warnings ride along."""
    payload, validation = _validated_glidepath_request()
    validation.raise_for_errors()

    _check_simulation_length(payload.end_age - payload.start_age, "end_age")

    result = simulate_glidepath(
        payload.initial_balance,
        payload.contribution_amount,
        payload.start_age,
        payload.end_age,
        payload.glidepath,
        payload.contribution_frequency,
        payload.compounding_frequency,
        payload.contribution_timing,
    )
    response = GlidepathResponse(
        **result.model_dump(),
        warnings=[issue.message for issue in validation.warnings],
    )
    return jsonify(response.model_dump())


@api_bp.post("/validate/glidepath")
def validate_glidepath() -> Any:
    """Report every error and warning for a glidepath request without simulating."""
    _, validation = _validated_glidepath_request()
    return jsonify(validation.to_dict())
