"""Unit tests for opaque pagination cursors."""

import base64

import pytest

from shared_kernel.pagination import InvalidCursorError, decode_cursor, encode_cursor


class TestCursors:
    """Tests for cursor encoding."""

    def test_cursor_is_base64_of_the_key(self):
        assert encode_cursor(42) == base64.urlsafe_b64encode(b"42").decode()

    def test_string_and_int_keys_encode_alike(self):
        assert encode_cursor("42") == encode_cursor(42)

    def test_decode_reverses_encode(self):
        assert decode_cursor(encode_cursor(1234)) == 1234

    def test_missing_cursor_is_zero(self):
        assert decode_cursor(None) == 0

    @pytest.mark.parametrize(
        "cursor",
        [
            "abc",  # bad padding
            base64.urlsafe_b64encode(b"abc").decode(),
            base64.urlsafe_b64encode(b"-5").decode(),
            base64.urlsafe_b64encode(b"\xff\xfe").decode(),
        ],
    )
    def test_invalid_cursor_raises(self, cursor):
        with pytest.raises(InvalidCursorError):
            decode_cursor(cursor)

    def test_invalid_cursor_is_a_value_error(self):
        assert issubclass(InvalidCursorError, ValueError)
