"""测试配置选项函数。"""

from awesomelog.logger.options import (
    apply_options,
    with_caller,
    with_color,
    with_file_format,
    with_file_level,
    with_file_rotation,
    with_format,
    with_full_config,
    with_level,
    with_stacktrace_level,
    with_time_format,
)
from awesomelog.logger.types import Config, Level, LogFormat


class TestApplyOptions:
    """测试选项按顺序应用的语义。"""

    def test_no_options_returns_defaults(self):
        assert apply_options(Config(), []) == Config()

    def test_later_option_wins(self):
        """测试同一字段上后面的选项覆盖前面的。"""
        config = apply_options(Config(), [with_level("debug"), with_level("error")])
        assert config.level is Level.ERROR

    def test_base_config_not_mutated(self):
        """测试选项不会修改原配置。"""
        base = Config()
        apply_options(base, [with_level("debug"), with_color(False)])
        assert base.level is Level.INFO
        assert base.enable_color is True

    def test_independent_fields(self):
        """测试不同字段的选项互不影响。"""
        config = apply_options(
            Config(),
            [
                with_format("json"),
                with_caller(False),
                with_time_format("HH:mm:ss"),
                with_stacktrace_level("error"),
            ],
        )
        assert config.format is LogFormat.JSON
        assert config.record_caller is False
        assert config.time_format == "HH:mm:ss"
        assert config.stacktrace_level is Level.ERROR
        assert config.level is Level.INFO

    def test_unknown_level_in_option(self):
        """测试选项中的未知级别同样回退到 INFO。"""
        config = apply_options(Config(), [with_level("debug"), with_level("loud")])
        assert config.level is Level.INFO


class TestFullConfig:
    """测试 with_full_config 整体替换。"""

    def test_replaces_everything_before(self):
        """测试整体替换会丢弃之前的修改。"""
        full = Config(level="warn", enable_color=False)
        config = apply_options(Config(), [with_format("json"), with_full_config(full)])
        assert config == full
        assert config.format is LogFormat.CONSOLE

    def test_later_options_apply_on_top(self):
        """测试整体替换之后的选项仍然生效。"""
        full = Config(level="warn")
        config = apply_options(Config(), [with_full_config(full), with_level("debug")])
        assert config.level is Level.DEBUG
        assert full.level is Level.WARN


class TestFileOptions:
    """测试文件输出相关选项。"""

    def test_file_rotation_enables_file_output(self):
        """测试 with_file_rotation 启用文件输出并设置参数。"""
        config = apply_options(
            Config(), [with_file_rotation("logs/svc.log", 5, 3, 2, False)]
        )
        assert config.write_to_file is True
        assert config.file.filename == "logs/svc.log"
        assert config.file.max_size == 5
        assert config.file.max_age == 3
        assert config.file.max_backups == 2
        assert config.file.compress is False
        assert config.file.format is LogFormat.JSON

    def test_file_rotation_resets_format(self):
        """测试 with_file_rotation 会把文件格式重置为 json。"""
        config = apply_options(
            Config(),
            [with_file_format("console"), with_file_rotation("a.log", 1, 1, 1, True)],
        )
        assert config.file.format is LogFormat.JSON

        config = apply_options(
            Config(),
            [with_file_rotation("a.log", 1, 1, 1, True), with_file_format("console")],
        )
        assert config.file.format is LogFormat.CONSOLE

    def test_file_level(self):
        """测试文件级别选项。"""
        config = apply_options(
            Config(),
            [with_level("warn"), with_file_level("debug"), with_file_rotation("a.log", 1, 1, 1, True)],
        )
        assert config.level is Level.WARN
        assert config.file_level is Level.DEBUG

        config = apply_options(config, [with_file_level(None)])
        assert config.file_level is Level.WARN
