"""
Identifier quoting and value escaping for MySQL.

Table and column names are quoted with backticks so they can never break out
of their position in a statement. Values should travel as bound parameters;
``escape`` exists for the few places where a literal must be rendered.
"""

from collections.abc import Sequence
from typing import Any

from pymysql.converters import escape_item

from mysqlkit.exceptions import ValidationError

DEFAULT_CHARSET = "utf8mb4"


def escape_id(identifier: str | Sequence[str], qualified: bool = True) -> str:
    """
    Quote a MySQL identifier.

    Args:
        identifier: Table or column name, or a sequence of names
        qualified: Treat dots as separators of a qualified name (schema.table)

    Returns:
        Quoted identifier, or a comma separated list for a sequence

    Raises:
        ValidationError: If an identifier is empty

    Examples:
        >>> escape_id("users")
        '`users`'
        >>> escape_id("app.users")
        '`app`.`users`'
        >>> escape_id("we`ird")
        '`we``ird`'
        >>> escape_id(["a", "b"])
        '`a`, `b`'
    """
    if not isinstance(identifier, str):
        return ", ".join(escape_id(name, qualified) for name in identifier)

    if not identifier:
        raise ValidationError("Identifier must not be empty")

    parts = identifier.split(".") if qualified else [identifier]
    if any(not part for part in parts):
        raise ValidationError(f"Invalid qualified identifier: {identifier!r}")

    return ".".join("`" + part.replace("`", "``") + "`" for part in parts)


def escape(value: Any, charset: str = DEFAULT_CHARSET) -> str:
    """Render a value as a MySQL literal using the driver's converters.

    Examples:
        >>> escape(42)
        '42'
        >>> escape(None)
        'NULL'
    """
    return escape_item(value, charset)
