import pytest

from cfgstore.types.values import REDACTION_TOKEN, ValueType, normalize_string, render_value


class TestAccepts:
    """Representability of natively stored values."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (0, {ValueType.UINT32, ValueType.INT32, ValueType.UINT64, ValueType.INT64}),
            (-1, {ValueType.INT32, ValueType.INT64}),
            (2**32, {ValueType.UINT64, ValueType.INT64}),
            (2**63, {ValueType.UINT64}),
            (-(2**63), {ValueType.INT64}),
            ("7", {ValueType.STRING}),
            ("", {ValueType.STRING}),
            (True, {ValueType.BOOL}),
            (1.5, set()),
            ([1], set()),
        ],
    )
    def test_accepts(self, raw, expected) -> None:
        assert {t for t in ValueType if t.accepts(raw)} == expected


class TestValidate:
    def test_integer_bounds(self) -> None:
        assert ValueType.UINT32.validate(2**32 - 1) == 2**32 - 1
        with pytest.raises(ValueError):
            ValueType.UINT32.validate(2**32)
        with pytest.raises(ValueError):
            ValueType.UINT64.validate(-1)
        with pytest.raises(ValueError):
            ValueType.INT32.validate(2**31)

    def test_bool_is_not_an_integer(self) -> None:
        with pytest.raises(TypeError):
            ValueType.UINT32.validate(True)
        with pytest.raises(TypeError):
            ValueType.BOOL.validate(1)

    def test_string_accepts_bytes_like(self) -> None:
        assert ValueType.STRING.validate(b"abc") == "abc"
        assert ValueType.STRING.validate(memoryview("é".encode("utf-8"))) == "é"
        with pytest.raises(TypeError):
            ValueType.STRING.validate(12)

    def test_bounds_only_for_integers(self) -> None:
        assert ValueType.INT64.bounds == (-(2**63), 2**63 - 1)
        with pytest.raises(TypeError):
            ValueType.STRING.bounds


class TestParse:
    @pytest.mark.parametrize("text", ["true", "1", "YES", "on"])
    def test_bool_true(self, text: str) -> None:
        assert ValueType.BOOL.parse(text) is True

    @pytest.mark.parametrize("text", ["false", "0", "No", "off"])
    def test_bool_false(self, text: str) -> None:
        assert ValueType.BOOL.parse(text) is False

    def test_bool_invalid(self) -> None:
        with pytest.raises(ValueError):
            ValueType.BOOL.parse("maybe")

    def test_integers(self) -> None:
        assert ValueType.UINT32.parse("0x10") == 16
        assert ValueType.INT32.parse("-5") == -5
        with pytest.raises(ValueError):
            ValueType.UINT32.parse("-5")


def test_coerce_rejects_foreign_types() -> None:
    assert ValueType.coerce(ValueType.INT32) is ValueType.INT32
    with pytest.raises(TypeError):
        ValueType.coerce("int32")
    with pytest.raises(TypeError):
        ValueType.coerce(float)


def test_normalize_string_bytearray() -> None:
    assert normalize_string(bytearray(b"xy")) == "xy"


def test_render_value() -> None:
    assert render_value("s3cret", True) == REDACTION_TOKEN
    assert render_value("plain", False) == "plain"
