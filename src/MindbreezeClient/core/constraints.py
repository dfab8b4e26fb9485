"""Constraint compilers producing Mindbreeze filter documents."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Sequence

from MindbreezeClient.errors import InvalidArgumentError

DATE_UNIT = "ms_since_1970"


class Constraint(ABC):
    """Accumulate filter entries for one label and compile them.

    Subclasses implement ``create`` for one constraint kind. A constraint may
    be created several times; every call appends entries to ``filter_base``.
    """

    def __init__(self, label: str) -> None:
        self.label = label
        self.filters: list[dict[str, Any]] = []

    @abstractmethod
    def create(self, values: Any) -> Constraint:
        """Append compiled filter entries for ``values``."""

    def compile(self) -> dict[str, Any]:
        """Return the filter document ``{label, filter_base}``."""
        return {"label": self.label, "filter_base": list(self.filters)}


class BetweenDatesConstraint(Constraint):
    """Range filter between two Unix timestamps (seconds), bounds inclusive."""

    def create(self, values: Any) -> BetweenDatesConstraint:
        if not isinstance(values, (list, tuple)) or len(values) != 2:
            raise InvalidArgumentError(
                "Value passed to BetweenDatesConstraint is invalid. Must be an array with two values."
            )
        if any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in values):
            raise InvalidArgumentError("BetweenDatesConstraint values must be Unix timestamps")

        start = values[0] * 1000
        end = values[1] * 1000
        self.filters.append(
            {
                "label": self.label,
                "and": [
                    {"num": start, "cmp": "GE", "unit": DATE_UNIT},
                    {"num": end, "cmp": "LE", "unit": DATE_UNIT},
                ],
                "value": {"num": start, "unit": DATE_UNIT},
            }
        )
        return self


class RegexConstraint(Constraint):
    """Exact-match filter expressed as an anchored literal regex."""

    def create(self, values: Any) -> RegexConstraint:
        for value in _as_list(values):
            text = _as_text(value)
            self.filters.append(
                {
                    "label": self.label,
                    "regex": literal_pattern(text),
                    "value": {"str": text},
                }
            )
        return self


class TermConstraint(Constraint):
    """Exact quoted-term filter, one entry per value."""

    def create(self, values: Any) -> TermConstraint:
        for value in _as_list(values):
            text = _as_text(value)
            self.filters.append(
                {
                    "label": self.label,
                    "and": [{"label": self.label, "quoted_term": text}],
                    "value": {"str": text},
                }
            )
        return self


_CONSTRAINT_TYPES: dict[str, type[Constraint]] = {
    "between_dates": BetweenDatesConstraint,
    "regex": RegexConstraint,
    "term": TermConstraint,
}


def supported_constraint_kinds() -> tuple[str, ...]:
    """Return constraint kinds accepted by ``create_constraint``."""
    return tuple(_CONSTRAINT_TYPES.keys())


def create_constraint(label: str, kind: str, data: Any) -> dict[str, Any]:
    """Build and compile one constraint.

    Args:
        label: Metadata label the constraint applies to (e.g. ``mes:date``).
        kind: One of ``between_dates``, ``regex`` or ``term``.
        data: Kind-specific input values.

    Returns:
        Compiled filter document.

    Raises:
        InvalidArgumentError: If ``kind`` is unknown or ``data`` is invalid.
    """
    constraint_cls = _CONSTRAINT_TYPES.get(kind)
    if constraint_cls is None:
        raise InvalidArgumentError(
            f"Constraint type does not exist: {kind}. Valid types: {', '.join(_CONSTRAINT_TYPES)}"
        )
    return constraint_cls(label).create(data).compile()


def literal_pattern(text: str) -> str:
    """Return a pattern matching exactly ``text`` and nothing else."""
    return f"^{re.escape(text)}$"


def _as_list(values: Any) -> Sequence[Any]:
    """Coerce a scalar into a one-element list."""
    if isinstance(values, (list, tuple)):
        return values
    return [values]


def _as_text(value: Any) -> str:
    if value is None:
        raise InvalidArgumentError("Constraint values must not be None")
    return str(value)
