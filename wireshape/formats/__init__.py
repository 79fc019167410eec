"""Named value formatters used by format rules.

Provides:
- Format registry: registration and retrieval of formatter factories
- Built-in formats: date, datetime, timestamp, number, string, upper, lower, boolean
"""

# Registry must be imported first (builtin uses the register_format decorator)
from wireshape.formats.registry import (
    Formatter,
    FormatterFactory,
    clear_registry,
    get_format,
    list_format_kinds,
    register_format,
)

from wireshape.formats.builtin import (
    create_boolean_formatter,
    create_date_formatter,
    create_datetime_formatter,
    create_lower_formatter,
    create_number_formatter,
    create_string_formatter,
    create_timestamp_formatter,
    create_upper_formatter,
)

BUILTIN_FORMATS = {
    "date": create_date_formatter,
    "datetime": create_datetime_formatter,
    "timestamp": create_timestamp_formatter,
    "number": create_number_formatter,
    "string": create_string_formatter,
    "upper": create_upper_formatter,
    "lower": create_lower_formatter,
    "boolean": create_boolean_formatter,
}

__all__ = [
    "register_format",
    "get_format",
    "list_format_kinds",
    "clear_registry",
    "Formatter",
    "FormatterFactory",
    "BUILTIN_FORMATS",
]
