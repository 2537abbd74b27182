"""
Positional placeholder translation.

Callers write statements with `?` placeholders. psycopg expects the `%s`
paramstyle and treats every `%` in the statement as a format marker once
parameters are bound, so statements are rewritten before execution:

    translate("SELECT name FROM players WHERE uuid = ? AND name LIKE 'a%'", 1)
    -> "SELECT name FROM players WHERE uuid = %s AND name LIKE 'a%%'"

A `?` inside a quoted literal (plain, `E'...'` escape or `$tag$...$tag$`
dollar-quoted), a quoted identifier or a comment is left alone.
"""

from __future__ import annotations

import re
from typing import Optional

from bungeesuite.database.errors import QueryFailure

PLACEHOLDER = "?"
DRIVER_PLACEHOLDER = "%s"

_DOLLAR_TAG = re.compile(r"\$(?:[A-Za-z_][A-Za-z0-9_]*)?\$")


def _is_identifier_char(ch: str) -> bool:
    return ch.isalnum() or ch in ("_", "$")


def _closing_quote(sql: str, start: int, quote: str, backslash_escapes: bool = False) -> int:
    """Return the index just past the quote closing the one at `start`."""
    i = start + 1
    while i < len(sql):
        if backslash_escapes and sql[i] == "\\":
            i += 2
            continue
        if sql[i] == quote:
            # A doubled quote is an escaped quote, not the end of the literal.
            if i + 1 < len(sql) and sql[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1
    return len(sql)


def _opaque_segment_end(sql: str, start: int) -> Optional[int]:
    """
    Return the end of a literal, quoted identifier or comment starting at `start`.

    Returns None when no such segment starts there.
    """
    ch = sql[start]
    follows_identifier = start > 0 and _is_identifier_char(sql[start - 1])
    if ch in ("'", '"'):
        return _closing_quote(sql, start, ch)
    if ch in ("E", "e") and sql.startswith("'", start + 1) and not follows_identifier:
        return _closing_quote(sql, start + 1, "'", backslash_escapes=True)
    if ch == "$" and not follows_identifier:
        tag = _DOLLAR_TAG.match(sql, start)
        if tag is not None:
            end = sql.find(tag.group(), tag.end())
            return len(sql) if end == -1 else end + len(tag.group())
    if sql.startswith("--", start):
        end = sql.find("\n", start)
        return len(sql) if end == -1 else end
    if sql.startswith("/*", start):
        end = sql.find("*/", start + 2)
        return len(sql) if end == -1 else end + 2
    return None


def count_placeholders(sql: str) -> int:
    """Count the positional placeholders in `sql`."""
    count = 0
    i = 0
    while i < len(sql):
        end = _opaque_segment_end(sql, i)
        if end is not None:
            i = end
            continue
        if sql[i] == PLACEHOLDER:
            count += 1
        i += 1
    return count


def translate(sql: str, param_count: int) -> str:
    """
    Rewrite `?` placeholders to the driver paramstyle.

    Parameters
    ----------
    sql : str
        Statement using positional `?` placeholders.
    param_count : int
        Number of parameters the caller supplied.

    Returns
    -------
    str
        The statement with `%s` placeholders and every literal `%` doubled.

    Raises
    ------
    QueryFailure
        If the number of placeholders differs from `param_count`.
    """
    parts = []
    placeholders = 0
    i = 0
    while i < len(sql):
        end = _opaque_segment_end(sql, i)
        if end is not None:
            parts.append(sql[i:end].replace("%", "%%"))
            i = end
            continue
        ch = sql[i]
        if ch == PLACEHOLDER:
            parts.append(DRIVER_PLACEHOLDER)
            placeholders += 1
        elif ch == "%":
            parts.append("%%")
        else:
            parts.append(ch)
        i += 1

    if placeholders != param_count:
        raise QueryFailure(
            f"Statement has {placeholders} placeholder(s) but {param_count} "
            f"parameter(s) were supplied"
        )
    return "".join(parts)


__all__ = ["PLACEHOLDER", "DRIVER_PLACEHOLDER", "count_placeholders", "translate"]
