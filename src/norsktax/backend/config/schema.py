"""Pydantic models describing the tax year configuration schema."""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
from typing import Annotated, Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ConfigurationMissingError(ConfigurationError):
    """Raised when a required configuration section is absent."""


def _coerce_decimal(value: Any) -> Any:
    # YAML floats go through ``str`` so 8.2 stays 8.2 instead of its binary form.
    if isinstance(value, bool):
        raise ConfigurationError("Boolean values are not valid amounts")
    if isinstance(value, float):
        return Decimal(str(value))
    return value


Amount = Annotated[Decimal, BeforeValidator(_coerce_decimal)]

UNLIMITED = Decimal("Infinity")

PERCENT_CEILING = Decimal("100")


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _require_non_negative(values: Mapping[str, Decimal], message: str) -> None:
    for label, value in values.items():
        if value < 0:
            raise ConfigurationError(f"{label}: {message}")


class SocialContributionConfig(ImmutableModel):
    """Trygdeavgift rates and the income band they apply within."""

    employee_rate: Amount
    self_employed_rate: Amount
    pensioner_rate: Amount
    lower_bound: Amount
    upper_bound: Amount
    stepped: bool = True
    adjustment_factor: Amount = Decimal("1")

    @model_validator(mode="after")
    def _validate_band(self) -> Self:
        _require_non_negative(
            {
                "employee_rate": self.employee_rate,
                "self_employed_rate": self.self_employed_rate,
                "pensioner_rate": self.pensioner_rate,
                "lower_bound": self.lower_bound,
                "upper_bound": self.upper_bound,
                "adjustment_factor": self.adjustment_factor,
            },
            "social contribution values must be non-negative",
        )
        if self.lower_bound > self.upper_bound:
            raise ConfigurationError(
                "Social contribution lower bound cannot exceed the upper bound"
            )
        return self

    def rate_for(self, *, self_employed: bool, pensioner: bool = False) -> Decimal:
        if self_employed:
            return self.self_employed_rate
        if pensioner:
            return self.pensioner_rate
        return self.employee_rate


_ROUNDING_MODES = {"half_up": ROUND_HALF_UP, "half_even": ROUND_HALF_EVEN}


class VatConfig(ImmutableModel):
    """MVA rates per category together with the rounding policy."""

    standard_rate: Amount
    reduced_rate: Amount
    food_rate: Amount
    fish_rate: Amount
    passenger_transport_rate: Amount
    accommodation_rate: Amount
    low_rate: Amount
    rounding: str = "half_up"
    decimals: int = Field(default=2, ge=0, le=6)

    @field_validator("rounding", mode="before")
    @classmethod
    def _normalise_rounding(cls, value: Any) -> str:
        if value is None:
            return "half_up"
        text = str(value).strip().lower()
        # Legacy configuration used "Normal" for commercial rounding.
        if text in {"normal", ""}:
            return "half_up"
        if text in {"bankers", "banker"}:
            return "half_even"
        if text not in _ROUNDING_MODES:
            raise ConfigurationError(f"Unsupported VAT rounding mode '{value}'")
        return text

    @model_validator(mode="after")
    def _validate_rates(self) -> Self:
        _require_non_negative(self.rates_by_category(), "VAT rates must be non-negative")
        return self

    def rates_by_category(self) -> dict[str, Decimal]:
        return {
            "standard": self.standard_rate,
            "reduced": self.reduced_rate,
            "food": self.food_rate,
            "fish": self.fish_rate,
            "passenger_transport": self.passenger_transport_rate,
            "accommodation": self.accommodation_rate,
            "low": self.low_rate,
        }

    def rate_for(self, category: str | None) -> Decimal:
        return self.rates_by_category().get(category or "standard", self.standard_rate)

    @property
    def rounding_mode(self) -> str:
        return _ROUNDING_MODES[self.rounding]

    @property
    def quantum(self) -> Decimal:
        return Decimal(1).scaleb(-self.decimals)


class StandardDeductionConfig(ImmutableModel):
    """Minifradrag: a percentage of business income up to a cap."""

    rate: Amount
    cap: Amount
    income_threshold: Amount

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        _require_non_negative(
            {"cap": self.cap, "income_threshold": self.income_threshold},
            "standard deduction amounts must be non-negative",
        )
        if not (0 <= self.rate <= 1):
            raise ConfigurationError("Standard deduction rate must be between 0 and 1")
        return self


class ExpenseCapConfig(ImmutableModel):
    """Deduction caps per expense category."""

    home_office: Amount
    travel: Amount
    courses: Amount
    supplies: Amount
    subscriptions: Amount
    representation: Amount
    gifts_per_employee: Amount
    car_allowance_per_km: Amount

    @model_validator(mode="after")
    def _validate_caps(self) -> Self:
        _require_non_negative(
            dict(self.model_dump()), "expense caps must be non-negative"
        )
        return self


class IncomeBands(ImmutableModel):
    """Income thresholds used to classify business size."""

    low: Amount
    medium: Amount
    high: Amount
    pensioner_threshold: Amount
    low_income_deduction_threshold: Amount

    @model_validator(mode="after")
    def _validate_order(self) -> Self:
        _require_non_negative(dict(self.model_dump()), "income bands must be non-negative")
        if not (self.low <= self.medium <= self.high):
            raise ConfigurationError("Income bands must be in ascending order")
        return self


class SalaryStrategyConfig(ImmutableModel):
    """Parameters for the salary/dividend split heuristics."""

    low_income_salary_percent: Amount
    medium_income_salary: Amount
    high_income_salary: Amount
    minimum_salary_for_benefits: Amount
    optimal_pension_salary: Amount
    corporate_conversion_threshold: Amount
    min_salary_percent: Amount
    max_salary_percent: Amount

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        _require_non_negative(
            dict(self.model_dump()), "salary strategy values must be non-negative"
        )
        for label in ("low_income_salary_percent", "min_salary_percent", "max_salary_percent"):
            if getattr(self, label) > 1:
                raise ConfigurationError(f"{label} must be a fraction between 0 and 1")
        return self


class ValidationBounds(ImmutableModel):
    """Plausibility limits applied to incoming requests."""

    min_income: Amount = Decimal("0")
    max_income: Amount
    max_expense: Amount
    max_amount: Amount = Decimal("100000000")
    max_kilometres: int = Field(ge=0)
    max_employees: int = Field(ge=0)
    min_age: int = Field(default=0, ge=0)
    max_age: int = Field(ge=0)

    @model_validator(mode="after")
    def _validate_ranges(self) -> Self:
        if self.min_income < 0 or self.min_income > self.max_income:
            raise ConfigurationError("Income bounds must satisfy 0 <= min_income <= max_income")
        if self.min_age > self.max_age:
            raise ConfigurationError("min_age cannot exceed max_age")
        return self


class MunicipalConfig(ImmutableModel):
    """Municipal income tax rates keyed by municipality number."""

    standard_rate: Amount
    rates: Mapping[str, Amount] = Field(default_factory=dict)

    @field_validator("rates", mode="before")
    @classmethod
    def _coerce_codes(cls, value: Any) -> Mapping[str, Any]:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            # Municipality numbers keep their leading zeros ("0301").
            return {str(key).zfill(4): val for key, val in value.items()}
        raise ConfigurationError("Municipal rates must be a mapping of codes to percentages")

    @model_validator(mode="after")
    def _validate_rates(self) -> Self:
        _require_non_negative(
            {"standard_rate": self.standard_rate, **self.rates},
            "municipal rates must be non-negative",
        )
        return self

    def rate_for(self, municipality: str | None) -> Decimal:
        if municipality and municipality in self.rates:
            return self.rates[municipality]
        return self.standard_rate


class EnterpriseConfig(ImmutableModel):
    """Sole-proprietorship specific switches."""

    allow_loss_carry_forward: bool = True
    loss_carry_forward_percent: Amount = Decimal("1")
    industry_rates: Mapping[str, Amount] = Field(default_factory=dict)

    @field_validator("industry_rates", mode="before")
    @classmethod
    def _coerce_industries(cls, value: Any) -> Mapping[str, Any]:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return {str(key): val for key, val in value.items()}
        raise ConfigurationError("Industry rates must be a mapping")

    @model_validator(mode="after")
    def _validate_percent(self) -> Self:
        if not (0 <= self.loss_carry_forward_percent <= 1):
            raise ConfigurationError("loss_carry_forward_percent must be between 0 and 1")
        return self


class PlanningBand(ImmutableModel):
    """Strategy bundle offered to businesses within one income band."""

    strategy_keys: Sequence[str]
    timeframe_key: str
    risk: str = "medium"

    @field_validator("strategy_keys", mode="before")
    @classmethod
    def _coerce_keys(cls, value: Any) -> Sequence[str]:
        if isinstance(value, (list, tuple)):
            return tuple(str(entry) for entry in value)
        raise ConfigurationError("Planning strategies must be provided as a list")

    @model_validator(mode="after")
    def _validate_band(self) -> Self:
        if not self.strategy_keys:
            raise ConfigurationError("Planning bands require at least one strategy")
        if self.risk not in {"low", "medium", "high"}:
            raise ConfigurationError("Planning band risk must be one of: low, medium, high")
        return self


PLANNING_BAND_NAMES = ("low", "medium", "high")


class PlanningConfig(ImmutableModel):
    """Coarse heuristics behind the planning and prepayment estimates."""

    baseline_effective_rate: Amount = Decimal("0.30")
    improvement_factor: Amount = Decimal("0.15")
    prepayment_share: Amount = Decimal("0.50")
    prior_loss_weight: Amount = Decimal("0.5")
    priority_labels: Sequence[str] = ("high", "medium", "low")
    bands: Mapping[str, PlanningBand]

    @model_validator(mode="after")
    def _validate_bands(self) -> Self:
        missing = [name for name in PLANNING_BAND_NAMES if name not in self.bands]
        if missing:
            raise ConfigurationMissingError(
                f"Planning configuration requires bands: {', '.join(missing)}"
            )
        if not self.priority_labels:
            raise ConfigurationError("At least one priority label must be configured")
        for label in (
            "baseline_effective_rate",
            "improvement_factor",
            "prepayment_share",
            "prior_loss_weight",
        ):
            if not (0 <= getattr(self, label) <= 1):
                raise ConfigurationError(f"{label} must be between 0 and 1")
        return self


REQUIRED_SECTIONS = (
    "social_contribution",
    "vat",
    "standard_deduction",
    "expense_caps",
    "income_bands",
    "salary_strategy",
    "validation",
    "municipal",
    "planning",
)


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year configuration."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    social_contribution: SocialContributionConfig
    vat: VatConfig
    standard_deduction: StandardDeductionConfig
    expense_caps: ExpenseCapConfig
    income_bands: IncomeBands
    salary_strategy: SalaryStrategyConfig
    validation: ValidationBounds
    municipal: MunicipalConfig
    enterprise: EnterpriseConfig = Field(default_factory=EnterpriseConfig)
    planning: PlanningConfig

    @model_validator(mode="before")
    @classmethod
    def _require_sections(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        for section in REQUIRED_SECTIONS:
            if not isinstance(prepared.get(section), Mapping):
                raise ConfigurationMissingError(
                    f"Configuration requires a '{section}' section"
                )

        return prepared


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> Self:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "Amount",
    "ConfigurationError",
    "ConfigurationMissingError",
    "EnterpriseConfig",
    "ExpenseCapConfig",
    "ImmutableModel",
    "IncomeBands",
    "MunicipalConfig",
    "PERCENT_CEILING",
    "PLANNING_BAND_NAMES",
    "PlanningBand",
    "PlanningConfig",
    "REQUIRED_SECTIONS",
    "SalaryStrategyConfig",
    "SocialContributionConfig",
    "StandardDeductionConfig",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "UNLIMITED",
    "ValidationBounds",
    "ValidationError",
    "VatConfig",
    "YearConfiguration",
]
