"""Pydantic models describing the public API surface."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

__all__ = [
    "BusinessCalculationRequest",
    "InvalidArgumentError",
    "Money",
    "OpaqueExtension",
    "PrivateUseExtension",
    "RequestExtension",
    "SocialContributionRequest",
    "TaxCalculationRequest",
    "VatCalculationRequest",
    "VatCategory",
    "format_validation_error",
]


class InvalidArgumentError(ValueError):
    """Raised when a request is absent or carries out-of-range values."""


def _coerce_money(value: Any) -> Any:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, bool):
        raise ValueError("boolean values are not valid amounts")
    if isinstance(value, float):
        return Decimal(str(value))
    return value


Money = Annotated[Decimal, BeforeValidator(_coerce_money)]


class VatCategory(str, Enum):
    """MVA categories with a configured rate."""

    STANDARD = "standard"
    REDUCED = "reduced"
    FOOD = "food"
    FISH = "fish"
    PASSENGER_TRANSPORT = "passenger_transport"
    ACCOMMODATION = "accommodation"
    LOW = "low"


class PrivateUseExtension(BaseModel):
    """Share of an asset used privately, reserved for benefit-in-kind rules."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["private_use"] = "private_use"
    asset: str = "car"
    share: Decimal = Field(default=Decimal("0"), ge=0, le=1)


class OpaqueExtension(BaseModel):
    """Untyped passthrough value kept for forward compatibility."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["opaque"] = "opaque"
    key: str = Field(min_length=1)
    value: str | int | float | bool | None = None


RequestExtension = Annotated[
    Union[PrivateUseExtension, OpaqueExtension], Field(discriminator="kind")
]


class _RequestBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int | None = None
    locale: str = "en"
    overrides: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @field_validator("locale", mode="before")
    @classmethod
    def _default_locale(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "en"
        return value

    @field_validator("overrides", mode="before")
    @classmethod
    def _default_overrides(cls, value: Any) -> Any:
        return {} if value is None else value


class TaxCalculationRequest(_RequestBase):
    """Personal tax input: income, municipality and taxpayer attributes."""

    income: Money = Decimal("0")
    municipality: str | None = None
    age: int | None = None
    pensioner: bool = False
    extensions_version: Literal[1] = 1
    extensions: tuple[RequestExtension, ...] = ()

    @field_validator("municipality", mode="before")
    @classmethod
    def _normalise_municipality(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        return text.zfill(4) if text.isdigit() else text

    @field_validator("extensions", mode="before")
    @classmethod
    def _default_extensions(cls, value: Any) -> Any:
        return () if value is None else value


class BusinessCalculationRequest(TaxCalculationRequest):
    """Sole proprietorship (ENK) input with itemised expenses."""

    business_income: Money = Decimal("0")
    general_expenses: Money = Decimal("0")
    payroll_costs: Money = Decimal("0")
    depreciation: Money = Decimal("0")
    office_expenses: Money = Decimal("0")
    travel_expenses: Money = Decimal("0")
    equipment_expenses: Money = Decimal("0")
    other_expenses: Money = Decimal("0")
    salary_withdrawn: Money = Decimal("0")
    has_employees: bool = False
    employee_count: int = 0
    prior_year_loss: Money = Decimal("0")
    first_year: bool = False
    industry_code: str | None = None
    business_kilometres: int = 0
    business_result: Money | None = None

    @property
    def expense_fields(self) -> dict[str, Decimal]:
        return {
            "general_expenses": self.general_expenses,
            "payroll_costs": self.payroll_costs,
            "depreciation": self.depreciation,
            "office_expenses": self.office_expenses,
            "travel_expenses": self.travel_expenses,
            "equipment_expenses": self.equipment_expenses,
            "other_expenses": self.other_expenses,
        }


class SocialContributionRequest(_RequestBase):
    """Input for a standalone trygdeavgift calculation."""

    income: Money = Decimal("0")
    self_employed: bool = False
    pensioner: bool = False


class VatCalculationRequest(_RequestBase):
    """Input for converting between gross and net amounts."""

    amount: Money = Decimal("0")
    category: VatCategory = VatCategory.STANDARD
    includes_vat: bool = False
    description: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _fallback_category(cls, value: Any) -> Any:
        # Unknown categories are charged at the standard rate.
        if isinstance(value, VatCategory):
            return value
        text = str(value or "").strip().lower()
        try:
            return VatCategory(text)
        except ValueError:
            return VatCategory.STANDARD


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
