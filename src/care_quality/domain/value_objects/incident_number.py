"""Incident number value object."""

from __future__ import annotations

import re
from dataclasses import dataclass

from care_quality.core.exceptions import InvalidIncidentNumberError

_PATTERN = re.compile(r"^INC-(\d{4})-(\d+)$")

PREFIX = "INC"
SEQUENCE_WIDTH = 6


@dataclass(frozen=True, order=True)
class IncidentNumber:
    """Sequential incident identifier rendered as ``INC-<year>-<seq>``.

    The sequence is zero-padded to six digits; larger sequences are rendered
    in full rather than truncated.
    """

    year: int
    sequence: int

    def __post_init__(self) -> None:
        """Validate business rules on value creation"""
        if self.sequence < 1:
            raise ValueError("Incident sequence must be positive")
        if not 1000 <= self.year <= 9999:
            raise ValueError("Incident year must have four digits")

    @classmethod
    def parse(cls, value: object) -> IncidentNumber:
        """Parse a stored incident number.

        Raises:
            InvalidIncidentNumberError: If the value does not match the format.
        """
        if not isinstance(value, str):
            raise InvalidIncidentNumberError(value)

        match = _PATTERN.match(value.strip())
        if match is None:
            raise InvalidIncidentNumberError(value)

        year, sequence = int(match.group(1)), int(match.group(2))
        if sequence < 1:
            raise InvalidIncidentNumberError(value)
        return cls(year=year, sequence=sequence)

    def format(self) -> str:
        """Render the canonical string form."""
        return f"{PREFIX}-{self.year}-{self.sequence:0{SEQUENCE_WIDTH}d}"

    def __str__(self) -> str:
        return self.format()
