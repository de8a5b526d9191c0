"""日志配置适配器。

本模块负责把 `Settings` 中与日志相关的字段映射为 `awesomelog` 的选项函数，
并提供 `apply_logging_from_settings` 用于初始化全局默认 logger。
"""

from __future__ import annotations

from typing import List, Optional

from awesomelog.config.settings import Settings, get_settings
from awesomelog.logger.base import Logger
from awesomelog.logger.options import (
    Option,
    with_caller,
    with_color,
    with_enqueue,
    with_file_format,
    with_file_rotation,
    with_format,
    with_level,
    with_stacktrace_level,
    with_time_format,
)


def map_settings_to_options(settings: Settings) -> List[Option]:
    """把 Settings 映射为按顺序应用的选项函数列表。"""
    options: List[Option] = [
        with_level(settings.log_level),
        with_format(settings.log_format),
        with_color(settings.log_color),
        with_caller(settings.log_caller),
        with_time_format(settings.log_time_format),
        with_stacktrace_level(settings.log_stacktrace_level),
        with_enqueue(settings.log_enqueue),
    ]
    if settings.log_file:
        options.append(
            with_file_rotation(
                settings.log_file,
                settings.log_max_size_mb,
                settings.log_max_age_days,
                settings.log_max_backups,
                settings.log_compress,
            )
        )
        # with_file_rotation 会把文件格式重置为 json，必须放在其后
        options.append(with_file_format(settings.log_file_format))
    return options


def apply_logging_from_settings(settings: Optional[Settings] = None) -> Logger:
    """从 settings 加载并初始化全局默认 logger。

    如果未传入 settings，会使用 `get_settings()` 获取单例。
    """
    if settings is None:
        settings = get_settings()

    options = map_settings_to_options(settings)

    # 延迟导入门面模块以避免循环依赖
    from awesomelog.logger import facade

    logger = facade.initialize(*options)
    if settings.log_intercept_stdlib:
        facade.intercept_stdlib()
    return logger


__all__ = ["map_settings_to_options", "apply_logging_from_settings"]
