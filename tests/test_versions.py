"""Tests for lazy_changesets.versions."""

from __future__ import annotations

from lazy_changesets.versions import is_pre_first_major, parse_version


class TestParseVersion:
    def test_full_semver(self) -> None:
        v = parse_version("1.2.3")
        assert v.major == 1
        assert v.minor == 2
        assert v.patch == 3

    def test_two_part_version(self) -> None:
        v = parse_version("1.2")
        assert v.major == 1
        assert v.minor == 2
        assert v.patch == 0

    def test_single_part_version(self) -> None:
        v = parse_version("5")
        assert v.major == 5
        assert v.minor == 0
        assert v.patch == 0


class TestIsPreFirstMajor:
    def test_zero_minor(self) -> None:
        assert is_pre_first_major("0.5.0") is True

    def test_zero_zero(self) -> None:
        assert is_pre_first_major("0.0.1") is True

    def test_exactly_one(self) -> None:
        assert is_pre_first_major("1.0.0") is False

    def test_short_version(self) -> None:
        assert is_pre_first_major("0.9") is True
        assert is_pre_first_major("2") is False
