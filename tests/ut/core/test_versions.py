"""版本号解析测试"""

from __future__ import annotations

import pytest

from pluginsync.core.exceptions import MalformedVersionError
from pluginsync.core.versions import is_newer, is_older, parse_version


class TestParse:
    @pytest.mark.parametrize("value", [
        "2.222.2", "1.14-2", "4.0.0-beta-1", " 2.80 ",
        "4.5.10-2.0", "1.0-SNAPSHOT", "1.25.1-1.1",
        "2.7-rc1234.abcdef012345", "1.2.3_1", "v1.0", "1.0+build.5",
    ])
    def test_jenkins_style_versions_parse(self, value: str) -> None:
        assert str(parse_version(value)) == value.strip()

    @pytest.mark.parametrize("value", ["", "abc", "1.0-", "1..2", "1.0 beta", "-1.0"])
    def test_malformed_raises(self, value: str) -> None:
        with pytest.raises(MalformedVersionError):
            parse_version(value)

    def test_malformed_raises_with_context(self) -> None:
        with pytest.raises(MalformedVersionError, match="git"):
            parse_version("abc", context="git")

    def test_prerelease_flag(self) -> None:
        assert parse_version("1.0-SNAPSHOT").is_prerelease
        assert parse_version("4.0.0-beta-1").is_prerelease
        assert not parse_version("4.5.10-2.0").is_prerelease


class TestOrdering:
    @pytest.mark.parametrize("older, newer", [
        ("1.9.9", "2.0"),
        ("2.8", "2.80"),
        ("1.9", "1.10"),
        # 数字限定符是修订号，排在发布号之后
        ("1.14", "1.14-2"),
        ("4.5.10", "4.5.10-1.0"),
        ("4.5.10-1.0", "4.5.10-2.0"),
        ("4.5.10-2.0", "4.5.13-1.0"),
        ("1.25.1-1.1", "1.25.1-1.2"),
        ("1.25.1-1.9", "1.25.1-1.10"),
        # 字母限定符是预发布，排在发布号之前
        ("1.0-SNAPSHOT", "1.0"),
        ("4.0.0-beta-1", "4.0.0"),
        ("4.0.0-alpha-2", "4.0.0-beta-1"),
        ("4.0.0-beta-1", "4.0.0-beta-2"),
        ("2.0-rc1", "2.0-SNAPSHOT"),
        ("0.9", "1.0-SNAPSHOT"),
    ])
    def test_ordering(self, older: str, newer: str) -> None:
        assert is_older(older, newer)
        assert is_newer(newer, older)

    @pytest.mark.parametrize("left, right", [
        ("1.0", "1.0"),
        ("1.0", "1"),
        ("1.0", "1.0.0"),
        ("4.5.10-2.0", "4.5.10-2"),
        ("1.0-final", "1.0"),
        ("1.0+build.5", "1.0"),
    ])
    def test_equivalent(self, left: str, right: str) -> None:
        assert parse_version(left) == parse_version(right)
        assert not is_newer(left, right)
        assert not is_older(left, right)
