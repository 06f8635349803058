"""版本号解析与比较

插件版本号沿用 Maven 写法，并非 PEP 440:
    2.222.2  1.14-2  4.5.10-2.0  1.25.1-1.1  4.0.0-beta-1  1.0-SNAPSHOT

拆成「发布号 + 限定符」两段比较:
  - 发布号为点分数字，交给 packaging.version 比较（末尾 0 不影响大小，1.0 == 1）
  - 限定符以数字开头视为修订号，排在同一发布号之后 (1.14 < 1.14-2)
  - 限定符以字母开头视为预发布，排在同一发布号之前 (4.0.0-beta-1 < 4.0.0)，
    已知标记按 alpha < beta < milestone < rc < snapshot 排序
  - final / ga / release 等同于无限定符
  - "+" 之后的构建元数据不参与比较

不符合上述写法的字符串视为输入损坏，抛出 MalformedVersionError。
"""

from __future__ import annotations

import functools
import re

from packaging.version import InvalidVersion, Version

from pluginsync.core.exceptions import MalformedVersionError

_VERSION_RE = re.compile(
    r"^v?(?P<release>\d+(?:\.\d+)*)"
    r"(?:[-._]?(?P<qualifier>[0-9A-Za-z][0-9A-Za-z~]*(?:[-._][0-9A-Za-z~]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
)
_TOKEN_RE = re.compile(r"\d+|[A-Za-z~]+")

_KNOWN_WORDS = {
    "alpha": 1, "a": 1,
    "beta": 2, "b": 2,
    "milestone": 3, "m": 3,
    "rc": 4, "cr": 4,
    "snapshot": 5,
}
_RELEASE_WORDS = ("final", "ga", "release")

PRERELEASE = -1
RELEASE = 0
REVISION = 1


def _token_key(token: str) -> tuple[int, int, str]:
    # 数字 > 任意单词；已知单词按固定顺序，未知单词按字典序排在最前
    if token.isdigit():
        return (1, int(token), "")
    word = token.lower()
    if word in _KNOWN_WORDS:
        return (0, _KNOWN_WORDS[word], "")
    return (0, 0, word)


@functools.total_ordering
class PluginVersion:
    """可比较的插件版本号"""

    def __init__(self, raw: str, release: Version, qualifier: str = "") -> None:
        self.raw = raw
        self.release = release
        tokens = _TOKEN_RE.findall(qualifier)
        if tokens and tokens[0].lower() in _RELEASE_WORDS:
            tokens = tokens[1:]
        while tokens and tokens[-1].isdigit() and int(tokens[-1]) == 0:
            tokens.pop()

        if not tokens:
            self.kind = RELEASE
        elif tokens[0].isdigit():
            self.kind = REVISION
        else:
            self.kind = PRERELEASE
        self.qualifier = tuple(_token_key(t) for t in tokens)

    @property
    def is_prerelease(self) -> bool:
        return self.kind == PRERELEASE

    def _key(self) -> tuple:
        return (self.release, self.kind, self.qualifier)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PluginVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: PluginVersion) -> bool:
        if not isinstance(other, PluginVersion):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        return f"PluginVersion({self.raw!r})"


def parse_version(value: str, context: str = "") -> PluginVersion:
    text = value.strip() if isinstance(value, str) else ""
    m = _VERSION_RE.match(text)
    if m is None:
        raise MalformedVersionError(str(value), context)
    try:
        release = Version(m.group("release"))
    except InvalidVersion as e:
        raise MalformedVersionError(str(value), context) from e
    return PluginVersion(text, release, m.group("qualifier") or "")


def is_newer(left: str, right: str, context: str = "") -> bool:
    """left 是否严格大于 right"""
    return parse_version(left, context) > parse_version(right, context)


def is_older(left: str, right: str, context: str = "") -> bool:
    """left 是否严格小于 right"""
    return parse_version(left, context) < parse_version(right, context)
