import pytest
from hypothesis import given, strategies as st

from hfdltools.kvargs import KVArgsError, KVError, error_string, parse_kvargs


def test_simple_pairs():
    assert parse_kvargs("path=-,mode=fast") == {"path": "-", "mode": "fast"}


def test_value_may_contain_equals_and_be_empty():
    assert parse_kvargs("a=b=c,d=") == {"a": "b=c", "d": ""}


def test_later_key_overrides():
    assert parse_kvargs("k=first,k=second") == {"k": "second"}


def test_none_input():
    with pytest.raises(KVArgsError) as exc:
        parse_kvargs(None)
    assert exc.value.code == KVError.NO_INPUT


def test_empty_string_has_no_key():
    with pytest.raises(KVArgsError) as exc:
        parse_kvargs("")
    assert exc.value.code == KVError.NO_KEY
    assert exc.value.position == 0


def test_missing_key_position():
    text = "a=1,,b=2"
    with pytest.raises(KVArgsError) as exc:
        parse_kvargs(text)
    assert exc.value.code == KVError.NO_KEY
    assert exc.value.position == text.index(",,") + 1


def test_missing_key_at_start():
    text = "=value"
    with pytest.raises(KVArgsError) as exc:
        parse_kvargs(text)
    assert exc.value.code == KVError.NO_KEY
    assert exc.value.position == text.index("=")


def test_missing_value_position():
    text = "a=1,bcd"
    with pytest.raises(KVArgsError) as exc:
        parse_kvargs(text)
    assert exc.value.code == KVError.NO_VALUE
    assert exc.value.position == len(text)


def test_error_is_value_error():
    with pytest.raises(ValueError):
        parse_kvargs("novalue")


def test_error_strings():
    assert error_string(KVError.NO_ERROR) == "success"
    assert error_string(KVError.NO_INPUT) == "no key-value string given"
    assert error_string(KVError.NO_KEY) == "no key name given"
    assert error_string(KVError.NO_VALUE) == "no value given"
    assert error_string(99) == "unknown error"


def test_error_message_contains_description():
    with pytest.raises(KVArgsError) as exc:
        parse_kvargs("x")
    assert "no value given" in str(exc.value)


_keys = st.text(
    alphabet=st.characters(blacklist_characters=",=", blacklist_categories=("Cs",)),
    min_size=1,
)
_values = st.text(alphabet=st.characters(blacklist_characters=",", blacklist_categories=("Cs",)))


@given(st.dictionaries(_keys, _values, min_size=1))
def test_round_trip(mapping):
    text = ",".join(f"{k}={v}" for k, v in mapping.items())
    assert parse_kvargs(text) == mapping