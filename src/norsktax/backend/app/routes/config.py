"""Expose configuration metadata and deduction limits.

Clients use these endpoints to discover the supported tax years and the caps
that apply to deductible expenses without duplicating the YAML-backed rules.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from norsktax.backend.app.http import problem_response
from norsktax.backend.app.models import serialise_result
from norsktax.backend.config.year_config import (
    YearConfiguration,
    load_manifest,
    load_year_configuration,
)
from norsktax.backend.services import get_max_deduction_limits
from norsktax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    supported_years = list(manifest.supported_years)
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


def _serialise_year(config: YearConfiguration) -> dict[str, Any]:
    contribution = config.social_contribution
    return {
        "year": config.year,
        "meta": serialise_result(dict(config.meta)),
        "social_contribution": serialise_result(contribution),
        "vat_rates": serialise_result(config.vat.rates_by_category()),
        "standard_deduction": serialise_result(config.standard_deduction),
        "municipal": {
            "standard_rate": serialise_result(config.municipal.standard_rate),
            "municipalities": sorted(config.municipal.rates),
        },
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return all configured years with their headline rates."""

    metadata = get_configuration_metadata()
    years = [
        _serialise_year(load_year_configuration(year))
        for year in metadata["supported_years"]
    ]
    payload = {
        "years": years,
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>/deduction-limits")
def get_deduction_limits(year: int) -> tuple[Any, int]:
    """Return deduction caps for ``year``, optionally for one industry."""

    industry = request.args.get("industry") or None
    try:
        limits = get_max_deduction_limits(industry, year)
    except FileNotFoundError as exc:
        return problem_response("not_found", status=404, message=str(exc)).to_response()

    payload = {
        "year": year,
        "industry": industry,
        "limits": serialise_result(limits),
    }
    return jsonify(payload), 200
