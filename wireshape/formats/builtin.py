"""Built-in formatters: dates, numbers, strings and booleans."""

from datetime import date, datetime
from typing import Any

from wireshape.core.exceptions import FormatError, SpecError
from wireshape.formats.registry import Formatter, register_format

_TRUE_STRINGS = {"1", "true", "yes", "on", "y"}
_FALSE_STRINGS = {"0", "false", "no", "off", "n", ""}


def _parse_datetime(value: Any) -> datetime | date:
    """Parse datetime from ISO format string or return if already a date."""
    if isinstance(value, (datetime, date)):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as e:
        raise FormatError(
            f"Cannot parse datetime from '{value}'",
            context={"value": value, "error": str(e)},
        ) from e


def _pattern_param(params: dict[str, Any], default: str | None) -> str | None:
    pattern = params.get("format", default)
    if pattern is not None and not isinstance(pattern, str):
        raise SpecError(
            "'format' parameter must be a string",
            context={"format_type": type(pattern).__name__},
        )
    return pattern


@register_format("date")
def create_date_formatter(params: dict[str, Any]) -> Formatter:
    """Render a date or datetime with a strftime pattern (default ISO date)."""
    pattern = _pattern_param(params, "%Y-%m-%d")

    def format_date(value: Any) -> str:
        return _parse_datetime(value).strftime(pattern)

    return format_date


@register_format("datetime")
def create_datetime_formatter(params: dict[str, Any]) -> Formatter:
    """Render a datetime with a strftime pattern, or ISO 8601 without one."""
    pattern = _pattern_param(params, None)

    def format_datetime(value: Any) -> str:
        parsed = _parse_datetime(value)
        if pattern is None:
            return parsed.isoformat()
        return parsed.strftime(pattern)

    return format_datetime


@register_format("timestamp")
def create_timestamp_formatter(params: dict[str, Any]) -> Formatter:
    """Render a datetime as integer seconds since the epoch."""

    def format_timestamp(value: Any) -> int:
        parsed = _parse_datetime(value)
        if not isinstance(parsed, datetime):
            parsed = datetime(parsed.year, parsed.month, parsed.day)
        return int(parsed.timestamp())

    return format_timestamp


@register_format("number")
def create_number_formatter(params: dict[str, Any]) -> Formatter:
    """Render a number as a float, optionally rounded to ``places`` digits."""
    places = params.get("places")
    if places is not None and (isinstance(places, bool) or not isinstance(places, int)):
        raise SpecError(
            "'places' parameter must be an integer",
            context={"places_type": type(places).__name__},
        )

    def format_number(value: Any) -> float | int:
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise FormatError(
                f"Cannot format '{value}' as a number",
                context={"value": value, "error": str(e)},
            ) from e
        if places is None:
            return number
        if places == 0:
            return int(round(number))
        return round(number, places)

    return format_number


@register_format("string")
def create_string_formatter(params: dict[str, Any]) -> Formatter:
    return str


@register_format("upper")
def create_upper_formatter(params: dict[str, Any]) -> Formatter:
    return lambda value: str(value).upper()


@register_format("lower")
def create_lower_formatter(params: dict[str, Any]) -> Formatter:
    return lambda value: str(value).lower()


@register_format("boolean")
def create_boolean_formatter(params: dict[str, Any]) -> Formatter:
    """Render a value as a boolean, accepting common string spellings."""

    def format_boolean(value: Any) -> bool:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
            raise FormatError(
                f"Cannot format '{value}' as a boolean",
                context={"value": value},
            )
        return bool(value)

    return format_boolean
