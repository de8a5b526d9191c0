"""全局默认 logger 与模块级便捷函数。

进程内只有一个由本模块持有的 `Registry`。`initialize` 构造匿名（名称为空）
实例并设为默认 logger；在此之前调用任何日志函数都会抛出
`NotInitializedError`，这是使用错误，不会被静默忽略。

重复调用 `initialize` 会先构造新的匿名实例，再关闭旧实例的 handler
（刷新并关闭文件），不会泄漏文件句柄。
"""

from __future__ import annotations

import contextlib
from typing import Any, Iterator, Optional

from .base import Logger, NotInitializedError
from .interceptors import InterceptHandler, intercept_stdlib as _intercept_stdlib
from .options import Option, apply_options, with_full_config
from .registry import Registry
from .types import Config, Level

# 模块级默认注册表
_REGISTRY = Registry()
_DEFAULT: Optional[Logger] = None


def registry() -> Registry:
    return _REGISTRY


def initialize(*options: Option) -> Logger:
    """初始化全局默认 logger，并把其配置作为之后新建命名 logger 的基础配置。

    目录或文件无法创建时抛出 SinkError，此时原有的默认 logger 保持不变。
    """
    global _DEFAULT
    config = apply_options(Config(), options)
    logger = _REGISTRY.replace("", with_full_config(config))
    _REGISTRY.set_default_config(config)
    _DEFAULT = logger
    return logger


def is_initialized() -> bool:
    return _DEFAULT is not None


def default() -> Logger:
    """返回全局默认 logger；未初始化时抛出 NotInitializedError。"""
    if _DEFAULT is None:
        raise NotInitializedError("awesomelog.initialize() must be called before logging")
    return _DEFAULT


def get_logger(name: str) -> Logger:
    """获取命名 logger；新名称继承 `initialize` 时的全局配置。"""
    return _REGISTRY.get_or_create(name)


def new_logger(name: str, *options: Option) -> Logger:
    """获取命名 logger，新名称在全局配置基础上再应用 options。

    名称已存在时直接返回已有实例，options 被忽略。
    """
    return _REGISTRY.get_or_create(name, *options)


def shutdown() -> None:
    """刷新并关闭全部 logger，清除全局默认 logger。"""
    global _DEFAULT
    _REGISTRY.sync()
    _REGISTRY.close()
    _REGISTRY.set_default_config(None)
    _DEFAULT = None


@contextlib.contextmanager
def scoped(*options: Option) -> Iterator[Logger]:
    """进入时初始化，退出时刷新并关闭全部 logger。"""
    logger = initialize(*options)
    try:
        yield logger
    finally:
        shutdown()


def intercept_stdlib(level: int = 0) -> InterceptHandler:
    """把标准库 logging 的记录转发到全局默认 logger。"""
    return _intercept_stdlib(lambda: _DEFAULT, level)


def sync() -> None:
    default().sync()


def debug(message: Any, /, *args: Any, **fields: Any) -> None:
    default()._log(Level.DEBUG, message, args, fields)


def info(message: Any, /, *args: Any, **fields: Any) -> None:
    default()._log(Level.INFO, message, args, fields)


def warn(message: Any, /, *args: Any, **fields: Any) -> None:
    default()._log(Level.WARN, message, args, fields)


warning = warn


def error(message: Any, /, *args: Any, **fields: Any) -> None:
    default()._log(Level.ERROR, message, args, fields)


def exception(message: Any, /, *args: Any, **fields: Any) -> None:
    default()._log(Level.ERROR, message, args, fields, exception=True)


def fatal(message: Any, /, *args: Any, **fields: Any) -> None:
    """记录 FATAL 日志，刷新所有 sink 后终止进程。"""
    default()._log(Level.FATAL, message, args, fields, terminate=True)


def log(level: str | Level, message: Any, /, *args: Any, **fields: Any) -> None:
    default()._log(Level.resolve(level), message, args, fields)


__all__ = [
    "registry",
    "initialize",
    "is_initialized",
    "default",
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
