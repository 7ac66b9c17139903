"""
Tests for Identity module

Покрывает:
- Нормализацию адресов (str любого регистра, 20 байт)
- Отклонение некорректных адресов
- Null identity
- Валидацию token_id (bool, отрицательные, границы uint256)
"""

import pytest

from nft_ledger.core.domain import (
    MAX_TOKEN_ID,
    NULL_IDENTITY,
    InvalidArgumentError,
    LedgerErrorKind,
    identity_from_int,
    is_null_identity,
    normalize_identity,
    validate_token_id,
)


# =============================================================================
# NORMALIZATION
# =============================================================================


class TestNormalizeIdentity:
    """Тесты normalize_identity."""

    def test_lowercases_hex(self):
        raw = "0xABCDEFabcdef0123456789ABCDEFabcdef012345"
        assert normalize_identity(raw) == raw.lower()

    def test_uppercase_prefix_accepted(self):
        raw = "0X" + "1" * 40
        assert normalize_identity(raw) == "0x" + "1" * 40

    def test_bytes_input(self):
        raw = bytes(range(20))
        assert normalize_identity(raw) == "0x" + raw.hex()

    def test_bytearray_input(self):
        assert normalize_identity(bytearray(20)) == NULL_IDENTITY

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "0x",
            "0x123",
            "1" * 40,
            "0x" + "g" * 40,
            "0x" + "1" * 41,
        ],
    )
    def test_malformed_string_rejected(self, value):
        with pytest.raises(InvalidArgumentError) as exc:
            normalize_identity(value)
        assert exc.value.kind == LedgerErrorKind.INVALID_ARGUMENT

    def test_wrong_byte_length_rejected(self):
        with pytest.raises(InvalidArgumentError):
            normalize_identity(b"\x01" * 19)

    def test_wrong_type_rejected(self):
        with pytest.raises(InvalidArgumentError):
            normalize_identity(12345)

    def test_invalid_argument_is_value_error(self):
        """InvalidArgumentError совместим с ValueError."""
        with pytest.raises(ValueError):
            normalize_identity(None)


class TestNullIdentity:
    """Тесты null identity."""

    def test_null_identity_is_all_zero(self):
        assert NULL_IDENTITY == "0x" + "0" * 40

    def test_is_null_identity(self):
        assert is_null_identity(NULL_IDENTITY)
        assert is_null_identity(bytes(20))
        assert not is_null_identity(identity_from_int(1))

    def test_identity_from_int(self):
        assert identity_from_int(1) == "0x" + "0" * 39 + "1"
        assert identity_from_int(0) == NULL_IDENTITY

    def test_identity_from_int_out_of_range(self):
        with pytest.raises(InvalidArgumentError):
            identity_from_int(2**160)
        with pytest.raises(InvalidArgumentError):
            identity_from_int(-1)


# =============================================================================
# TOKEN ID
# =============================================================================


class TestValidateTokenId:
    """Тесты validate_token_id."""

    def test_zero_and_max_are_valid(self):
        assert validate_token_id(0) == 0
        assert validate_token_id(MAX_TOKEN_ID) == MAX_TOKEN_ID

    def test_negative_rejected(self):
        with pytest.raises(InvalidArgumentError):
            validate_token_id(-1)

    def test_above_max_rejected(self):
        with pytest.raises(InvalidArgumentError):
            validate_token_id(MAX_TOKEN_ID + 1)

    def test_custom_max(self):
        assert validate_token_id(10, max_token_id=10) == 10
        with pytest.raises(InvalidArgumentError):
            validate_token_id(11, max_token_id=10)

    def test_bool_rejected(self):
        """bool - подкласс int, но не token_id."""
        with pytest.raises(InvalidArgumentError):
            validate_token_id(True)

    @pytest.mark.parametrize("value", [1.0, "1", None])
    def test_non_int_rejected(self, value):
        with pytest.raises(InvalidArgumentError):
            validate_token_id(value)
