"""Cron-Feld-Grammatik: Syntax- und Wertebereichsprüfung.

Ein Feld ist ``*`` oder eine kommagetrennte Liste aus Einzelwerten,
Bereichen (``a-b``) und Schrittweiten (``*/n``, ``a-b/n``). Monats- und
Wochentagsnamen sind nur als alleinstehender Wert erlaubt.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from agentcron.errors import InvalidFieldError

_NUMBER = re.compile(r"^\d+$")


@dataclass(frozen=True)
class FieldSpec:
    """Wertebereich und erlaubte Namen eines Cron-Felds."""

    name: str
    low: int
    high: int
    names: frozenset[str] = frozenset()


MONTH_NAMES = frozenset(
    ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"]
)

WEEKDAY_NAMES = frozenset(
    [
        "sun", "mon", "tue", "wed", "thu", "fri", "sat",
        "sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday",
    ]
)

# Reihenfolge = Prüfreihenfolge in validate()
FIELD_SPECS: dict[str, FieldSpec] = {
    "minute": FieldSpec("minute", 0, 59),
    "hour": FieldSpec("hour", 0, 23),
    "day": FieldSpec("day", 1, 31),
    "month": FieldSpec("month", 1, 12, MONTH_NAMES),
    # 0 und 7 stehen beide für Sonntag
    "weekday": FieldSpec("weekday", 0, 7, WEEKDAY_NAMES),
}

CRON_FIELDS: tuple[str, ...] = tuple(FIELD_SPECS)


def _check_number(spec: FieldSpec, raw: str, value: str) -> int:
    if not _NUMBER.match(raw):
        raise InvalidFieldError(spec.name, value, f"'{raw}' is not a number")
    number = int(raw)
    if not spec.low <= number <= spec.high:
        raise InvalidFieldError(
            spec.name, value, f"{number} out of range {spec.low}-{spec.high}"
        )
    return number


def _check_item(spec: FieldSpec, item: str, value: str) -> None:
    if not item:
        raise InvalidFieldError(spec.name, value, "empty list item")

    base, sep, step = item.partition("/")
    if sep:
        if not _NUMBER.match(step) or int(step) < 1:
            raise InvalidFieldError(spec.name, value, f"invalid step '{step}'")
        if base != "*" and "-" not in base:
            raise InvalidFieldError(
                spec.name, value, "a step needs '*' or a range in front of it"
            )

    if base == "*":
        return

    if "-" in base:
        start_raw, _, end_raw = base.partition("-")
        start = _check_number(spec, start_raw, value)
        end = _check_number(spec, end_raw, value)
        if start > end:
            raise InvalidFieldError(spec.name, value, f"range {base} is reversed")
        return

    _check_number(spec, base, value)


def validate_field(name: str, value: int | str) -> str:
    """Prüft einen Cron-Feldwert und gibt ihn normalisiert zurück.

    Args:
        name: Feldname (minute, hour, day, month, weekday).
        value: Wert als Integer oder String (z.B. ``5``, ``"0,30"``, ``"*/15"``).

    Returns:
        Der Wert als String ohne umgebende Leerzeichen.

    Raises:
        InvalidFieldError: Bei Syntaxfehlern oder Werten außerhalb des Bereichs.
        KeyError: Bei unbekanntem Feldnamen.
    """
    spec = FIELD_SPECS[name]

    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise InvalidFieldError(name, value, "must be an integer or a string")

    if isinstance(value, int):
        if not spec.low <= value <= spec.high:
            raise InvalidFieldError(
                name, value, f"{value} out of range {spec.low}-{spec.high}"
            )
        return str(value)

    text = value.strip()
    if not text:
        raise InvalidFieldError(name, value, "must not be empty")
    if text == "*":
        return text
    if text.lower() in spec.names:
        return text

    for item in text.split(","):
        _check_item(spec, item, value)
    return text


def is_valid_field(name: str, value: int | str) -> bool:
    """True wenn der Wert für das Feld gültig ist."""
    try:
        validate_field(name, value)
    except InvalidFieldError:
        return False
    return True
