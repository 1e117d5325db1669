"""Help text pretty-printing helpers."""

from __future__ import annotations

USAGE_INDENT_STEP = 4
USAGE_OPT_NAME_COLWIDTH = 48


def _ind(level: int) -> int:
    return level * USAGE_INDENT_STEP


def describe_option(name: str, description: str, indent: int) -> str:
    """Return one help line with the option name and its description aligned.

    The description starts at column ``USAGE_OPT_NAME_COLWIDTH`` unless the
    name is too long, in which case a single space separates them.
    """
    shift = USAGE_OPT_NAME_COLWIDTH - len(name) - _ind(indent)
    shift = max(shift, 1)
    return f"{' ' * _ind(indent)}{name}{' ' * shift}{description}"