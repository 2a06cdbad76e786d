"""Tests für die Cron-Feld-Grammatik.

Testet Wildcard, Einzelwerte, Listen, Bereiche, Schritte, Namen und
die Wertebereiche aller fünf Felder.
"""

from __future__ import annotations

import pytest

from agentcron.cron.fields import CRON_FIELDS, FIELD_SPECS, is_valid_field, validate_field
from agentcron.errors import InvalidFieldError


class TestFieldOrder:
    def test_fixed_order(self) -> None:
        assert CRON_FIELDS == ("minute", "hour", "day", "month", "weekday")

    def test_domains(self) -> None:
        assert (FIELD_SPECS["minute"].low, FIELD_SPECS["minute"].high) == (0, 59)
        assert (FIELD_SPECS["hour"].low, FIELD_SPECS["hour"].high) == (0, 23)
        assert (FIELD_SPECS["day"].low, FIELD_SPECS["day"].high) == (1, 31)
        assert (FIELD_SPECS["month"].low, FIELD_SPECS["month"].high) == (1, 12)
        assert (FIELD_SPECS["weekday"].low, FIELD_SPECS["weekday"].high) == (0, 7)


class TestValidValues:
    """Gültige Werte werden akzeptiert und normalisiert."""

    @pytest.mark.parametrize("name", CRON_FIELDS)
    def test_wildcard(self, name: str) -> None:
        assert validate_field(name, "*") == "*"

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("minute", "0"),
            ("minute", "59"),
            ("hour", "0"),
            ("hour", "23"),
            ("day", "1"),
            ("day", "31"),
            ("month", "1"),
            ("month", "12"),
            ("weekday", "0"),
            ("weekday", "7"),
        ],
    )
    def test_bounds(self, name: str, value: str) -> None:
        assert validate_field(name, value) == value

    def test_integer_is_stringified(self) -> None:
        assert validate_field("minute", 30) == "30"
        assert validate_field("hour", 0) == "0"

    def test_comma_list(self) -> None:
        assert validate_field("minute", "0,30") == "0,30"
        assert validate_field("day", "1,7,14,21,28") == "1,7,14,21,28"

    def test_surrounding_whitespace_is_stripped(self) -> None:
        assert validate_field("hour", " 0,12 ") == "0,12"

    def test_range_and_step(self) -> None:
        assert validate_field("minute", "*/15") == "*/15"
        assert validate_field("hour", "9-17") == "9-17"
        assert validate_field("hour", "8-18/2") == "8-18/2"
        assert validate_field("weekday", "1-5") == "1-5"

    @pytest.mark.parametrize("value", ["jan", "Feb", "DEC"])
    def test_month_names(self, value: str) -> None:
        assert validate_field("month", value) == value

    @pytest.mark.parametrize("value", ["sun", "Mon", "saturday", "SUNDAY"])
    def test_weekday_names(self, value: str) -> None:
        assert validate_field("weekday", value) == value

    def test_sunday_as_zero_and_seven(self) -> None:
        assert validate_field("weekday", "0") == "0"
        assert validate_field("weekday", "7") == "7"
        assert validate_field("weekday", 0) == "0"
        assert validate_field("weekday", 7) == "7"


class TestInvalidValues:
    """Ungültige Werte werfen InvalidFieldError mit Feldnamen."""

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("minute", "60"),
            ("minute", 60),
            ("minute", -1),
            ("hour", "24"),
            ("day", "0"),
            ("day", "32"),
            ("month", "0"),
            ("month", "13"),
            ("weekday", "8"),
        ],
    )
    def test_out_of_range(self, name: str, value: int | str) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            validate_field(name, value)
        assert exc_info.value.field == name
        assert exc_info.value.value == value
        assert "out of range" in exc_info.value.reason

    @pytest.mark.parametrize(
        "value",
        ["", "   ", "abc", "-1", "1,", ",1", "1,,2", "5-", "*/0", "*/x", "5/2", "30-10", "1.5", "0, 30"],
    )
    def test_malformed(self, value: str) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            validate_field("minute", value)
        assert exc_info.value.field == "minute"

    def test_month_name_not_in_weekday(self) -> None:
        with pytest.raises(InvalidFieldError):
            validate_field("weekday", "jan")

    def test_weekday_name_not_in_month(self) -> None:
        with pytest.raises(InvalidFieldError):
            validate_field("month", "mon")

    def test_names_not_allowed_in_lists(self) -> None:
        with pytest.raises(InvalidFieldError):
            validate_field("month", "jan,feb")

    @pytest.mark.parametrize("value", [True, None, 1.5, ["0"]])
    def test_wrong_type(self, value: object) -> None:
        with pytest.raises(InvalidFieldError, match="integer or a string"):
            validate_field("hour", value)  # type: ignore[arg-type]

    def test_unknown_field(self) -> None:
        with pytest.raises(KeyError):
            validate_field("second", "0")

    def test_error_code(self) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            validate_field("hour", "25")
        assert exc_info.value.error_code == "INVALID_FIELD"
        assert exc_info.value.details["field"] == "hour"


class TestIsValidField:
    def test_true_and_false(self) -> None:
        assert is_valid_field("minute", "0,30")
        assert not is_valid_field("minute", "0,60")
