from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Union


class DomainErrorKind(str, Enum):
    DIVISION_BY_ZERO = "division_by_zero"
    NO_SOLUTION = "no_solution"
    INFINITE = "infinite"
    UNDEFINED = "undefined"
    PAYMENT_TOO_LOW = "payment_too_low"


@dataclass(frozen=True)
class NotComputable:
    """A formula result for inputs outside the formula's valid domain.

    Returned instead of NaN or infinity so callers can show guidance rather
    than a meaningless number.
    """

    kind: DomainErrorKind
    message: str


Outcome = Union[float, NotComputable]


def is_computable(outcome: Outcome) -> bool:
    return not isinstance(outcome, NotComputable)


class InputValidationError(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors
