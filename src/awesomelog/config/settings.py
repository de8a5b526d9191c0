"""应用配置（基于 pydantic-settings）。

日志相关配置通过环境变量注入，再由 `awesomelog.config.log` 映射为选项函数。
"""

from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """日志配置模型（可通过环境变量注入）。

    环境变量前缀：AWESOMELOG_
    例如 AWESOMELOG_LOG_LEVEL=debug
    """

    log_level: str = "info"
    log_format: str = "console"
    log_color: bool = True
    log_caller: bool = True
    log_time_format: str = "YYYY-MM-DD HH:mm:ss.SSS"
    log_stacktrace_level: str = "fatal"
    log_enqueue: bool = False
    # 文件输出，留空则只输出到控制台
    log_file: Optional[str] = None
    log_file_format: str = "json"
    log_max_size_mb: int = 100
    log_max_age_days: int = 7
    log_max_backups: int = 10
    log_compress: bool = True
    log_intercept_stdlib: bool = False

    model_config = SettingsConfigDict(env_prefix="AWESOMELOG_")


# module-level cached settings
_SETTINGS: Optional[Settings] = None


def get_settings(force_reload: bool = False) -> Settings:
    """返回全局 Settings 单例（按需从环境加载）。

    如果 force_reload=True，会从环境重新创建实例。
    """

    global _SETTINGS
    if _SETTINGS is None or force_reload:
        _SETTINGS = Settings()
    return _SETTINGS


__all__ = ["Settings", "get_settings"]
