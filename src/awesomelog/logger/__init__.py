"""awesomelog.logger 包。

围绕 loguru 提供命名 logger 注册表、控制台/JSON 编码器与带轮转的文件输出：
- `types.py`：Level、LogFormat、Config、FileConfig
- `options.py`：配置选项函数
- `encoders.py`：JSON 与控制台编码器
- `sinks.py`：sink、轮转文件 sink 与 sink 组合
- `registry.py`：每个名称只构造一次的 Registry
- `facade.py`：全局默认 logger 与模块级函数
"""

from .base import Logger, LoggerError, NotInitializedError, SinkError
from .encoders import ConsoleEncoder, Encoder, JsonEncoder, select_encoder
from .options import (
    Option,
    apply_options,
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
from .registry import Registry
from .sinks import (
    CompositeSink,
    RotatingFileSink,
    Sink,
    StreamSink,
    build_file_sink,
    compose,
    derive_path,
)
from .types import Config, FileConfig, Level, LogFormat

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
    "Encoder",
    "JsonEncoder",
    "ConsoleEncoder",
    "select_encoder",
    "Sink",
    "StreamSink",
    "RotatingFileSink",
    "CompositeSink",
    "compose",
    "derive_path",
    "build_file_sink",
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
