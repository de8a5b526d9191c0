"""日志配置选项函数。

每个选项都是纯函数 `Config -> Config`，按顺序作用于默认配置：
同一字段上后面的选项覆盖前面的选项，`with_full_config` 整体替换配置。
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from .types import Config, FileConfig, Level, LogFormat

Option = Callable[[Config], Config]


def _replace(config: Config, **changes: Any) -> Config:
    # 通过 model_validate 重新走一遍校验，保证级别/格式的宽松解析生效
    data = config.model_dump()
    data.update(changes)
    return Config.model_validate(data)


def _replace_file(config: Config, **changes: Any) -> Config:
    data = config.file.model_dump()
    data.update(changes)
    return _replace(config, file=FileConfig.model_validate(data))


def apply_options(config: Config, options: Iterable[Option]) -> Config:
    """把选项依次应用到 config 上并返回新的配置。"""
    for option in options:
        config = option(config)
    return config


def with_level(level: str | Level) -> Option:
    """设置日志级别。"""
    return lambda c: _replace(c, level=level)


def with_format(fmt: str | LogFormat) -> Option:
    """设置控制台输出格式（json / console）。"""
    return lambda c: _replace(c, format=fmt)


def with_time_format(time_format: str) -> Option:
    return lambda c: _replace(c, time_format=time_format)


def with_color(enable: bool) -> Option:
    return lambda c: _replace(c, enable_color=enable)


def with_caller(enable: bool) -> Option:
    """设置是否记录调用者信息。"""
    return lambda c: _replace(c, record_caller=enable)


def with_caller_base_dir(path: Optional[str]) -> Option:
    return lambda c: _replace(c, caller_base_dir=path)


def with_stacktrace_level(level: str | Level) -> Option:
    """设置附带调用栈的最低级别。"""
    return lambda c: _replace(c, stacktrace_level=level)


def with_enqueue(enable: bool) -> Option:
    return lambda c: _replace(c, enqueue=enable)


def with_file_rotation(
    filename: str,
    max_size: int,
    max_age: int,
    max_backups: int,
    compress: bool,
) -> Option:
    """启用文件输出并设置轮转参数。

    文件格式会被重置为 json，如需其他格式请在其后追加 `with_file_format`。
    """

    def apply(c: Config) -> Config:
        file_config = FileConfig(
            filename=filename,
            max_size=max_size,
            max_age=max_age,
            max_backups=max_backups,
            compress=compress,
            format=LogFormat.JSON,
            level=c.file.level,
        )
        return _replace(c, write_to_file=True, file=file_config)

    return apply


def with_file_format(fmt: str | LogFormat) -> Option:
    return lambda c: _replace_file(c, format=fmt)


def with_file_level(level: Optional[str | Level]) -> Option:
    """为文件 sink 单独设置级别；传 None 则沿用全局级别。"""
    return lambda c: _replace_file(c, level=level)


def with_full_config(config: Config) -> Option:
    """使用完整配置整体替换。"""
    return lambda _c: config.model_copy(deep=True)


__all__ = [
    "Option",
    "apply_options",
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
]
