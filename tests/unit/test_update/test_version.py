"""Unit tests for version comparison."""

import pytest

from src.update.version import compare_versions, is_newer_version, parse_version


class TestParseVersion:
    """Tests for parse_version."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("1.2.3", [1, 2, 3]),
            ("v1.2.3", [1, 2, 3]),
            (" 2.0 ", [2, 0]),
            ("1.x.3", [1, 0, 3]),
            ("1.2-beta", [1, 0]),
        ],
    )
    def test_components(self, raw: str, expected: list[int]) -> None:
        """Components are integers; anything else counts as 0."""
        assert parse_version(raw) == expected


class TestCompareVersions:
    """Tests for compare_versions."""

    @pytest.mark.parametrize(
        ("left", "right", "expected"),
        [
            ("1.2.3", "1.2.3", 0),
            ("1.2", "1.2.0", 0),
            ("1.10", "1.9", 1),
            ("1.9", "1.10", -1),
            ("2.0", "1.99.99", 1),
            ("v1.3", "1.2.9", 1),
            ("1.2.0.1", "1.2", 1),
        ],
    )
    def test_ordering(self, left: str, right: str, expected: int) -> None:
        """The first differing numeric component decides."""
        assert compare_versions(left, right) == expected


class TestIsNewerVersion:
    """Tests for is_newer_version."""

    def test_newer(self) -> None:
        """A higher version is newer."""
        assert is_newer_version("1.3.0", "1.2.9") is True

    def test_equal_is_not_newer(self) -> None:
        """Equal versions are not an update."""
        assert is_newer_version("1.2", "1.2.0") is False

    def test_older(self) -> None:
        """A lower version is not newer."""
        assert is_newer_version("1.0", "1.2") is False
