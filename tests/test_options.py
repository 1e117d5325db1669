import pytest

from hfdltools.options import (
    USAGE_INDENT_STEP,
    USAGE_OPT_NAME_COLWIDTH,
    describe_option,
)


@pytest.mark.parametrize("indent", [0, 1, 2])
def test_description_column_is_fixed(indent):
    line = describe_option("--help", "Displays this text", indent)
    assert line.index("Displays this text") == USAGE_OPT_NAME_COLWIDTH
    assert line.startswith(" " * (indent * USAGE_INDENT_STEP) + "--help")


def test_long_name_gets_single_space():
    name = "--" + "x" * USAGE_OPT_NAME_COLWIDTH
    line = describe_option(name, "descr", 1)
    assert line == " " * USAGE_INDENT_STEP + name + " descr"


def test_empty_name():
    line = describe_option("", "(See help)", 1)
    assert line.strip() == "(See help)"
    assert line.index("(See help)") == USAGE_OPT_NAME_COLWIDTH


def test_no_trailing_newline():
    line = describe_option("--utc", "Use UTC", 1)
    assert "\n" not in line
    assert line.endswith("Use UTC")