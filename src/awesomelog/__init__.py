"""awesomelog：基于 loguru 的结构化日志门面。

特性：
- 按名称管理的 logger 实例（同名只构造一次，线程安全）
- 彩色控制台输出，或结构化 JSON 输出
- 按大小轮转、按数量/天数清理、可压缩的日志文件
- 全局默认 logger 与模块级便捷函数

用法示例::

    import awesomelog

    awesomelog.initialize(
        awesomelog.with_level("debug"),
        awesomelog.with_file_rotation("logs/app.log", 100, 7, 10, True),
    )
    awesomelog.get_logger("user-service").info("login", user="admin")
"""

from .logger import (
    Config,
    FileConfig,
    Level,
    LogFormat,
    Logger,
    LoggerError,
    NotInitializedError,
    Registry,
    SinkError,
    with_caller,
    with_caller_base_dir,
    with_color,
    with_enqueue,
    with_file_format,
    with_file_level,
    with_file_rotation,
    with_format,
    with_full_config,
    with_level,
    with_stacktrace_level,
    with_time_format,
)
from .logger.facade import (
    debug,
    default,
    error,
    exception,
    fatal,
    get_logger,
    info,
    initialize,
    intercept_stdlib,
    is_initialized,
    log,
    new_logger,
    registry,
    scoped,
    shutdown,
    sync,
    warn,
    warning,
)

__all__ = [
    "Config",
    "FileConfig",
    "Level",
    "LogFormat",
    "Logger",
    "LoggerError",
    "NotInitializedError",
    "SinkError",
    "Registry",
    "with_level",
    "with_format",
    "with_time_format",
    "with_color",
    "with_caller",
    "with_caller_base_dir",
    "with_stacktrace_level",
    "with_enqueue",
    "with_file_rotation",
    "with_file_format",
    "with_file_level",
    "with_full_config",
    "initialize",
    "is_initialized",
    "default",
    "registry",
    "get_logger",
    "new_logger",
    "shutdown",
    "scoped",
    "intercept_stdlib",
    "sync",
    "debug",
    "info",
    "warn",
    "warning",
    "error",
    "exception",
    "fatal",
    "log",
]
