"""统一异常体系

所有业务异常继承 PluginSyncError，核心层只抛出，不退出进程。
CLI 层据此输出友好提示并决定退出码。

分类:
  - 404 (插件不在更新中心) 不是异常，由 Fetcher 内部合成占位记录
  - 其余拉取 / 解析失败均为致命错误，整次解析立即中止
"""

from __future__ import annotations


class PluginSyncError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(PluginSyncError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(PluginSyncError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class FetchError(PluginSyncError):
    """插件元数据拉取失败"""

    code = "FETCH_ERROR"


class TransportError(FetchError):
    """网络层失败（连接、DNS、读写中断等）"""

    code = "TRANSPORT_ERROR"


class UnexpectedStatusError(FetchError):
    """更新中心返回了既不是成功也不是 404 的状态码"""

    code = "UNEXPECTED_STATUS"

    def __init__(self, status: int, url: str) -> None:
        super().__init__(f"非预期的 HTTP 状态 {status}: {url}")
        self.status = status
        self.url = url


class MalformedVersionError(PluginSyncError):
    """版本号无法解析"""

    code = "MALFORMED_VERSION"

    def __init__(self, value: str, context: str = "") -> None:
        label = f" ({context})" if context else ""
        super().__init__(f"无法解析的版本号 '{value}'{label}")
        self.value = value


class ManifestReadError(PluginSyncError):
    """插件包不可读或 MANIFEST.MF 内容无效"""

    code = "MANIFEST_ERROR"


class CycleError(PluginSyncError):
    """依赖链中出现环"""

    code = "DEPENDENCY_CYCLE"

    def __init__(self, path: list[str]) -> None:
        super().__init__(f"检测到循环依赖: {' -> '.join(path)}")
        self.path = path
