"""Tests for lazy_changesets.write."""

from __future__ import annotations

import re
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml
from pydantic import ValidationError
from tomlkit.exceptions import ParseError

from lazy_changesets.builder import CATEGORIES_OF_CHANGE
from lazy_changesets.models import CategoryOfChange, Changeset, Release
from lazy_changesets.parse import parse_changeset
from lazy_changesets.write import (
    BUMP_ORDER,
    get_change_types_section,
    get_releases_section,
    group_by_bump_type,
    render_changeset,
    write_changeset,
)

ADDED, CHANGED = CATEGORIES_OF_CHANGE[0], CATEGORIES_OF_CHANGE[1]


def _header(text: str) -> dict[str, str]:
    return yaml.safe_load(text.split("---")[1])


class TestGroupByBumpType:
    def test_fixed_order(self) -> None:
        groups = group_by_bump_type(
            [Release(name="p", type="patch"), Release(name="m", type="major")]
        )
        assert tuple(groups) == BUMP_ORDER

    def test_none_bucket_always_empty(self) -> None:
        releases = [
            Release(name="a", type="major"),
            Release(name="b", type="minor"),
            Release(name="c", type="patch"),
        ]
        groups = group_by_bump_type(releases)
        assert groups["none"] == []
        assert [r.name for r in groups["minor"]] == ["b"]

    def test_unknown_type_counts_as_major(self) -> None:
        odd = Release.model_construct(name="odd", type="none")
        assert group_by_bump_type([odd])["major"] == [odd]


class TestGetReleasesSection:
    def test_quotes_names(self) -> None:
        section = get_releases_section(
            [Release(name="@scope/pkg", type="minor"), Release(name="b", type="patch")]
        )
        assert section == '---\n"@scope/pkg": minor\n"b": patch\n---\n'

    def test_escapes_quotes_in_names(self) -> None:
        section = get_releases_section([Release(name='we"ird', type="patch")])
        assert _header(section) == {'we"ird': "patch"}

    def test_no_releases(self) -> None:
        assert get_releases_section([]) == "---\n\n---\n"


class TestGetChangeTypesSection:
    def test_all_lines(self) -> None:
        section = get_change_types_section(
            [
                CategoryOfChange(category=ADDED, description="new flag"),
                CategoryOfChange(category=CHANGED, description="faster"),
            ]
        )
        assert section == "- [ Added ] new flag\n- [ Changed ] faster\n"

    def test_filters_by_bump_type(self) -> None:
        categories = [
            CategoryOfChange(category=ADDED, description="big", type="major"),
            CategoryOfChange(category=ADDED, description="small", type="patch"),
        ]
        assert get_change_types_section(categories, "patch") == "- [ Added ] small\n"

    def test_empty_description_has_no_trailing_space(self) -> None:
        section = get_change_types_section(
            [CategoryOfChange(category=ADDED, description="")]
        )
        assert section == "- [ Added ]\n"


class TestRenderChangeset:
    def test_header_and_summary(self) -> None:
        changeset = Changeset(
            summary="Fixed a bug",
            releases=[Release(name="a", type="major"), Release(name="b", type="minor")],
        )
        assert render_changeset(changeset) == (
            '---\n"a": major\n"b": minor\n---\n\nFixed a bug\n'
        )

    def test_empty_changeset(self) -> None:
        assert render_changeset(Changeset()) == "---\n\n---\n"

    def test_categories_single_block(self) -> None:
        changeset = Changeset(
            releases=[Release(name="a", type="patch"), Release(name="b", type="major")],
            category_of_change_list=[
                CategoryOfChange(category=ADDED, description="x", type="patch"),
                CategoryOfChange(category=ADDED, description="y", type="major"),
            ],
        )
        assert render_changeset(changeset) == (
            '---\n"a": patch\n"b": major\n---\n\n- [ Added ] x\n- [ Added ] y\n'
        )

    def test_split_blocks_in_bump_order(self) -> None:
        changeset = Changeset(
            releases=[Release(name="p", type="patch"), Release(name="m", type="major")],
            category_of_change_list=[
                CategoryOfChange(category=ADDED, description="for patch", type="patch"),
                CategoryOfChange(category=CHANGED, description="for major", type="major"),
            ],
        )

        text = render_changeset(changeset, split_by_bump_type=True)

        assert text == (
            '---\n"m": major\n---\n\n- [ Changed ] for major\n'
            "\n"
            '---\n"p": patch\n---\n\n- [ Added ] for patch\n'
        )

    def test_split_ignored_without_categories(self) -> None:
        changeset = Changeset(
            summary="s",
            releases=[Release(name="p", type="patch"), Release(name="m", type="major")],
        )
        assert render_changeset(changeset, split_by_bump_type=True) == (
            '---\n"p": patch\n"m": major\n---\n\ns\n'
        )

    def test_summary_is_stripped(self) -> None:
        changeset = Changeset(summary="  padded \n\n", releases=[])
        assert render_changeset(changeset).endswith("\n\npadded\n")

    def test_escapes_summary_that_looks_like_a_category(self) -> None:
        changeset = Changeset(
            summary="- [ Added ] not a category\n\nmore",
            releases=[Release(name="a", type="patch")],
        )
        assert render_changeset(changeset) == (
            '---\n"a": patch\n---\n\n- \\[ Added ] not a category\n\nmore\n'
        )


class TestWriteChangeset:
    def test_writes_file_named_by_id(self, tmp_path: Path) -> None:
        changeset_dir = tmp_path / ".changeset"
        changeset = Changeset(
            summary="Added a feature", releases=[Release(name="pkg", type="minor")]
        )

        changeset_id = write_changeset(changeset, changeset_dir)

        assert re.fullmatch(r"[a-z0-9]+(-[a-z0-9]+)+", changeset_id)
        path = changeset_dir / f"{changeset_id}.md"
        assert path.read_text() == '---\n"pkg": minor\n---\n\nAdded a feature\n'

    def test_round_trips_special_names(self, tmp_path: Path) -> None:
        releases = [
            Release(name="@scope/name", type="major"),
            Release(name="key: value", type="minor"),
            Release(name="plain", type="patch"),
        ]

        changeset_id = write_changeset(
            Changeset(summary="s", releases=releases), tmp_path
        )

        parsed = parse_changeset((tmp_path / f"{changeset_id}.md").read_text())
        assert parsed.releases == releases
        assert _header((tmp_path / f"{changeset_id}.md").read_text()) == {
            "@scope/name": "major",
            "key: value": "minor",
            "plain": "patch",
        }

    @patch("lazy_changesets.write.human_id")
    def test_each_call_writes_a_new_file(
        self, mock_human_id: MagicMock, tmp_path: Path
    ) -> None:
        mock_human_id.side_effect = ["one-two-three", "four-five-six"]
        changesets = [
            Changeset(summary="", releases=[Release(name="a", type="major")]),
            Changeset(summary="", releases=[Release(name="b", type="patch")]),
        ]

        ids = [write_changeset(cs, tmp_path) for cs in changesets]

        assert ids == ["one-two-three", "four-five-six"]
        assert sorted(p.name for p in tmp_path.glob("*.md")) == [
            "four-five-six.md",
            "one-two-three.md",
        ]

    def test_split_by_bump_type(self, tmp_path: Path) -> None:
        changeset = Changeset(
            releases=[Release(name="a", type="minor"), Release(name="b", type="major")],
            category_of_change_list=[
                CategoryOfChange(category=ADDED, description="for b", type="major"),
                CategoryOfChange(category=ADDED, description="for a", type="minor"),
            ],
        )

        changeset_id = write_changeset(changeset, tmp_path, split_by_bump_type=True)

        text = (tmp_path / f"{changeset_id}.md").read_text()
        assert text.index('"b": major') < text.index('"a": minor')
        assert "patch" not in text

    def test_applies_format_config(self, tmp_path: Path) -> None:
        (tmp_path / ".mdformat.toml").write_text("wrap = 20\n")
        summary = " ".join(["word"] * 30)

        changeset_id = write_changeset(
            Changeset(summary=summary, releases=[Release(name="a", type="patch")]),
            tmp_path / ".changeset",
        )

        text = (tmp_path / ".changeset" / f"{changeset_id}.md").read_text()
        body = text.split("---\n")[-1].strip().splitlines()
        assert len(body) > 1
        assert all(len(line) <= 20 for line in body)

    def test_malformed_format_config_propagates(self, tmp_path: Path) -> None:
        (tmp_path / ".mdformat.toml").write_text("wrap = [\n")
        changeset_dir = tmp_path / ".changeset"

        with pytest.raises(ParseError):
            write_changeset(Changeset(summary="s"), changeset_dir)

        assert not changeset_dir.exists()

    def test_invalid_format_option_propagates(self, tmp_path: Path) -> None:
        (tmp_path / ".mdformat.toml").write_text('wrap = "sometimes"\n')

        with pytest.raises(ValidationError):
            write_changeset(Changeset(summary="s"), tmp_path)

        assert list(tmp_path.glob("*.md")) == []

    def test_category_lookalike_summary_round_trips(self, tmp_path: Path) -> None:
        changeset = Changeset(
            summary="- [ Added ] looks like a category\n\nreal text",
            releases=[Release(name="a", type="patch")],
        )

        changeset_id = write_changeset(changeset, tmp_path)

        parsed = parse_changeset((tmp_path / f"{changeset_id}.md").read_text())
        assert parsed.category_of_change_list == []
        assert "looks like a category" in parsed.summary
        assert parsed.summary.endswith("real text")
