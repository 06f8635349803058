"""网络工具 - 更新中心地址拼接与 URL 安全校验"""

from __future__ import annotations

from urllib.parse import quote, urlparse

from pluginsync.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


def pinned_url(base: str, name: str, version: str, ext: str) -> str:
    """指定版本地址: <base>/<name>/<version>/<name>.<ext>"""
    n, v = quote(name, safe=""), quote(version, safe="")
    return f"{base.rstrip('/')}/{n}/{v}/{n}.{ext}"


def latest_url(base: str, name: str, ext: str) -> str:
    """最新版本地址: <base>/<name>.<ext>"""
    return f"{base.rstrip('/')}/{quote(name, safe='')}.{ext}"
