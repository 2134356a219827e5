"""Tests for detakit.utils helpers."""

import pytest

from detakit.exceptions import InvalidProjectKeyError, PayloadError
from detakit.utils import chunk_iter, normalize_names, quote_name, split_project_key, validate_key


class TestChunkIter:
    def test_bytes(self):
        assert list(chunk_iter(b"abcdefg", 3)) == [b"abc", b"def", b"g"]

    def test_list(self):
        assert list(chunk_iter([1, 2, 3, 4], 2)) == [[1, 2], [3, 4]]

    def test_empty(self):
        assert list(chunk_iter([], 5)) == []

    def test_non_positive_size_yields_whole(self):
        assert list(chunk_iter([1, 2, 3], 0)) == [[1, 2, 3]]


class TestQuoteName:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("plain.txt", "plain.txt"),
            ("a/b", "a%2Fb"),
            ("with space", "with%20space"),
            ("q?x=1&y", "q%3Fx%3D1%26y"),
            ("ü", "%C3%BC"),
        ],
    )
    def test_quote(self, name, expected):
        assert quote_name(name) == expected


class TestValidation:
    def test_validate_key(self):
        assert validate_key("abc") == "abc"
        with pytest.raises(PayloadError):
            validate_key("")
        with pytest.raises(PayloadError):
            validate_key(None)
        with pytest.raises(PayloadError):
            validate_key(3)

    def test_normalize_names(self):
        assert normalize_names("a") == ["a"]
        assert normalize_names(("a", "b")) == ["a", "b"]
        assert normalize_names(n for n in ["x"]) == ["x"]

    def test_normalize_names_rejects_bad_input(self):
        with pytest.raises(PayloadError):
            normalize_names("")
        with pytest.raises(PayloadError):
            normalize_names(["ok", ""])
        with pytest.raises(PayloadError):
            normalize_names(42)


class TestSplitProjectKey:
    def test_valid(self):
        assert split_project_key("a0abc_secret") == ("a0abc", "secret")

    @pytest.mark.parametrize("key", ["abc", "a_b_c", "_x", "x_", None])
    def test_invalid(self, key):
        with pytest.raises(InvalidProjectKeyError):
            split_project_key(key)
