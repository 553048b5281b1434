"""Unit tests for regscout.utils.version_utils.

Covers tag cleaning, semver-shaped parsing, and the selection of the
highest release per major line that feeds both the tag and the npm
summaries.
"""

from __future__ import annotations

import pytest
from typing import List, Optional
from semantic_version import Version

from regscout.utils.version_utils import (
    clean_version,
    major_of,
    parse_version,
    resolve_major_lines,
)


@pytest.mark.unit
class TestCleanVersion:
    """Tests for clean_version tag normalization."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1.2.3", "1.2.3"),
            ("v1.2.3", "1.2.3"),
            ("=1.2.3", "1.2.3"),
            ("  v0.25.6  ", "0.25.6"),
            ("1.0.0-beta.2", "1.0.0-beta.2"),
            ("1.0.0+build.7", "1.0.0+build.7"),
            ("v1.0.0-next.3", "1.0.0-next.3"),
        ],
    )
    def test_valid_tags(self, raw: str, expected: str) -> None:
        assert clean_version(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["", "latest", "release-1", "1.2", "v1.2.3.4", "plugin@1.0.0"],
    )
    def test_invalid_tags(self, raw: str) -> None:
        assert clean_version(raw) is None

    def test_none(self) -> None:
        assert clean_version(None) is None


@pytest.mark.unit
class TestParseVersion:
    """Tests for parse_version."""

    def test_release(self) -> None:
        assert parse_version("1.4.0") == Version("1.4.0")

    def test_prerelease_orders_before_release(self) -> None:
        pre = parse_version("1.0.0-beta.1")
        final = parse_version("1.0.0")

        assert pre is not None and final is not None
        assert pre < final

    def test_numeric_prerelease_orders_before_release(self) -> None:
        pre = parse_version("1.0.0-1")
        final = parse_version("1.0.0")

        assert pre is not None and final is not None
        assert pre < final

    def test_custom_prerelease_label(self) -> None:
        version = parse_version("1.0.0-next.1")

        assert version is not None
        assert version.major == 1
        assert version.prerelease == ("next", "1")

    @pytest.mark.parametrize("raw", [None, "", "v1.2.3", "1.2", "garbage"])
    def test_unusable(self, raw: Optional[str]) -> None:
        assert parse_version(raw) is None

    def test_major_of(self) -> None:
        assert major_of(Version("0.9.1")) == 0
        assert major_of(Version("1.2.0")) == 1


@pytest.mark.unit
class TestResolveMajorLines:
    """Tests for resolve_major_lines."""

    def test_picks_highest_per_major(self) -> None:
        v0, v1 = resolve_major_lines(["1.2.0", "0.9.0", "0.10.1", "1.10.0", "1.9.9"])

        assert v0 == "0.10.1"
        assert v1 == "1.10.0"

    def test_ignores_other_majors_and_junk(self) -> None:
        v0, v1 = resolve_major_lines(["2.0.0", "junk", "0.1.0", "3.1.4"])

        assert v0 == "0.1.0"
        assert v1 is None

    def test_empty(self) -> None:
        assert resolve_major_lines([]) == (None, None)

    def test_only_v1(self) -> None:
        assert resolve_major_lines(["1.0.0", "1.0.1"]) == (None, "1.0.1")

    def test_prerelease_loses_to_release(self) -> None:
        versions: List[str] = ["1.0.0-beta.1", "1.0.0", "1.0.0-alpha.3"]
        assert resolve_major_lines(versions) == (None, "1.0.0")

    def test_numeric_prerelease_loses_to_release(self) -> None:
        assert resolve_major_lines(["1.0.0", "1.0.0-1"]) == (None, "1.0.0")
        assert resolve_major_lines(["1.0.0-1", "1.0.0"]) == (None, "1.0.0")

    def test_custom_prerelease_is_kept(self) -> None:
        assert resolve_major_lines(["0.9.0", "1.0.0-next.1"]) == ("0.9.0", "1.0.0-next.1")

    def test_prerelease_identifiers_use_semver_precedence(self) -> None:
        versions = ["1.0.0-next.2", "1.0.0-next.10", "1.0.0-alpha"]
        assert resolve_major_lines(versions) == (None, "1.0.0-next.10")

    def test_order_does_not_matter(self) -> None:
        versions = ["0.1.0", "1.1.0", "0.3.0", "1.0.0"]

        assert resolve_major_lines(versions) == resolve_major_lines(list(reversed(versions)))

    def test_results_have_expected_majors(self) -> None:
        v0, v1 = resolve_major_lines(["0.0.1", "1.99.0", "0.99.99"])

        assert v0 is not None and Version(v0).major == 0
        assert v1 is not None and Version(v1).major == 1
