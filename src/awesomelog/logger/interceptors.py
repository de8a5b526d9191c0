"""把标准库 logging 的记录转发到 awesomelog。"""

from __future__ import annotations

import inspect
import logging
from typing import Callable, Optional

from .base import Logger
from .types import Level


class InterceptHandler(logging.Handler):
    """标准库 logging handler：把记录转交给目标 Logger。

    target 是一个返回 Logger 的可调用对象，每次 emit 时解析，这样全局默认
    logger 被重新初始化后仍能拿到最新实例；返回 None 时丢弃记录。
    """

    def __init__(self, target: Callable[[], Optional[Logger]], level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._target = target

    def emit(self, record: logging.LogRecord) -> None:
        logger = self._target()
        if logger is None:
            return
        level = Level.from_number(record.levelno)

        # 跳过 logging 内部帧以定位调用者
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        # 不经过 fatal，标准库的 CRITICAL 不会触发进程退出
        logger._log(
            level,
            record.getMessage(),
            (),
            {"stdlib_logger": record.name},
            depth=depth,
            exception=record.exc_info,
        )


def intercept_stdlib(
    target: Callable[[], Optional[Logger]], level: int = logging.NOTSET
) -> InterceptHandler:
    """用 InterceptHandler 替换根 logger 的全部 handler 并返回它。"""
    handler = InterceptHandler(target)
    logging.root.handlers = [handler]
    logging.root.setLevel(level)
    return handler


__all__ = ["InterceptHandler", "intercept_stdlib"]
