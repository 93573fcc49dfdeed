"""Fill performance curves.

A fill's characteristic KaV/L is correlated against the liquid-to-gas ratio
N with one of two power laws:

- 'Single': KaV/L = 10 ** (a * N + b)
- 'Double': KaV/L = a * N ** b

Constants `a` and `b` come from the fill manufacturer (in the selection
application: from the tower model catalog).
"""
from dataclasses import dataclass
from enum import Enum


class FillFormula(Enum):
    SINGLE = 'Single'
    DOUBLE = 'Double'

    @classmethod
    def parse(cls, value: 'FillFormula | str') -> 'FillFormula | None':
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value.strip().lower() == member.value.lower():
                    return member
        return None


def fill_delivered_coefficient(
    a: float,
    b: float,
    N: float,
    formula: FillFormula | str
) -> float:
    """Returns the KaV/L the fill delivers at liquid-to-gas ratio `N`.

    Returns 0 if `formula` is not recognized, or if a 'Double' curve is
    evaluated at a non-positive `N`.
    """
    match FillFormula.parse(formula):
        case FillFormula.SINGLE:
            return 10.0 ** (a * N + b)
        case FillFormula.DOUBLE:
            if N <= 0.0:
                return 0.0
            return a * N ** b
    return 0.0


@dataclass(frozen=True)
class FillCorrelation:
    a: float
    b: float
    formula: FillFormula = FillFormula.DOUBLE

    def delivered(self, N: float) -> float:
        return fill_delivered_coefficient(self.a, self.b, N, self.formula)
