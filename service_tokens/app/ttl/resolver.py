"""
TTL resolution for token expiry.
"""

from enum import Enum
from typing import Any, Mapping, NamedTuple, Union

from shared.errors import InvalidTTLError, UnknownUnitError


class TimeUnit(str, Enum):
    """Time units accepted in a TTL specification."""
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"

    @property
    def seconds(self) -> int:
        return SECONDS_PER_UNIT[self]

    @classmethod
    def parse(cls, value: Union["TimeUnit", str]) -> "TimeUnit":
        """Parse a unit from an enum member or its singular/plural name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().lower()
            if name.endswith("s"):
                name = name[:-1]
            for unit in cls:
                if unit.value == name:
                    return unit
        raise UnknownUnitError(value)


SECONDS_PER_UNIT = {
    TimeUnit.SECOND: 1,
    TimeUnit.MINUTE: 60,
    TimeUnit.HOUR: 60 * 60,
    TimeUnit.DAY: 24 * 60 * 60,
    TimeUnit.WEEK: 7 * 24 * 60 * 60,
}


class TTLSpec(NamedTuple):
    """Normalized time-to-live: a whole quantity of a time unit."""
    quantity: int
    unit: TimeUnit

    @property
    def seconds(self) -> int:
        return self.quantity * self.unit.seconds


DEFAULT_TTL = TTLSpec(4, TimeUnit.WEEK)


def _parse_quantity(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidTTLError(f"Invalid TTL quantity: {value!r}", {"quantity": value})
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidTTLError(f"Invalid TTL quantity: {value!r}", {"quantity": str(value)})


def parse_ttl(value: Any) -> TTLSpec:
    """Normalize a TTL given as a pair, a mapping, or a "<quantity> <unit>" string.

    Quantities may be integers or numeric strings; units may be a
    ``TimeUnit`` or its name. Raises ``UnknownUnitError`` for an
    unrecognized unit and ``InvalidTTLError`` for anything else that
    cannot be read as a TTL.
    """
    if isinstance(value, TTLSpec):
        return value

    if isinstance(value, Mapping):
        if "quantity" not in value or "unit" not in value:
            raise InvalidTTLError("TTL mapping requires 'quantity' and 'unit'", {"ttl": dict(value)})
        quantity, unit = value["quantity"], value["unit"]
    elif isinstance(value, str):
        parts = value.split()
        if len(parts) != 2:
            raise InvalidTTLError(f"Invalid TTL: {value!r}", {"ttl": value})
        quantity, unit = parts
    elif isinstance(value, (tuple, list)) and len(value) == 2:
        quantity, unit = value
    else:
        raise InvalidTTLError(f"Invalid TTL: {value!r}", {"ttl": str(value)})

    return TTLSpec(_parse_quantity(quantity), TimeUnit.parse(unit))


def resolve_expiry(issued_at: int, ttl: Any) -> int:
    """Return the expiry timestamp for a token issued at ``issued_at``."""
    return issued_at + parse_ttl(ttl).seconds
