"""Output contracts shared by the calculator endpoints."""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

from moneymaster.domain.outcomes import DomainErrorKind

Unit = Literal["currency", "percent", "units", "months", "years"]


class DomainErrorDetail(BaseModel):
    kind: DomainErrorKind
    message: str


class CalculatorResult(BaseModel):
    """Outcome of one calculator run.

    ``value`` is None exactly when ``error`` is set; the caller shows the
    error message instead of a number.
    """

    kind: str
    title: str
    unit: Unit
    value: Optional[float] = None
    details: Dict[str, Optional[float]] = Field(default_factory=dict)
    subtitle: Optional[str] = None
    error: Optional[DomainErrorDetail] = None

    @property
    def computable(self) -> bool:
        return self.error is None


class CalculatorInfo(BaseModel):
    kind: str
    title: str
    description: str
    group: str
    unit: Unit
