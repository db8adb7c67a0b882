"""
Tests unitaires pour les fonctions utilitaires.
"""

import pytest

from src.utils.helpers import chunked, clean_title, first_name, parse_year, strip_invisible_chars


class TestStripInvisibleChars:
    """Tests pour strip_invisible_chars."""

    def test_removes_direction_marks(self) -> None:
        assert strip_invisible_chars("\u200e流浪\ufeff地球") == "流浪地球"


class TestCleanTitle:
    """Tests pour clean_title."""

    def test_trims(self) -> None:
        assert clean_title("  满江红\u200f ") == "满江红"

    def test_empty(self) -> None:
        assert clean_title("") == ""


class TestParseYear:
    """Tests pour parse_year."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2023", 2023),
            (2019, 2019),
            ("2023年", 2023),
            ("", None),
            (None, None),
            ("0", None),
            ("未知", None),
        ],
    )
    def test_parse_year(self, raw, expected) -> None:
        assert parse_year(raw) == expected


class TestFirstName:
    """Tests pour first_name."""

    @pytest.mark.parametrize(
        "names, expected",
        [("郭帆,另一位", "郭帆"), ("张艺谋/李安", "张艺谋"), ("吴京，屈楚萧", "吴京"), ("", "")],
    )
    def test_first_name(self, names: str, expected: str) -> None:
        assert first_name(names) == expected


class TestChunked:
    """Tests pour chunked."""

    def test_batches(self) -> None:
        assert list(chunked([1, 2, 3, 4, 5], 2)) == [[1, 2], [3, 4], [5]]

    def test_empty(self) -> None:
        assert list(chunked([], 3)) == []

    def test_invalid_size(self) -> None:
        with pytest.raises(ValueError):
            list(chunked([1], 0))
