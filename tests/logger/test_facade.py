"""测试全局默认 logger 与模块级便捷函数。"""

import json
import logging

import pytest

import awesomelog
from awesomelog.logger import facade
from awesomelog.logger.base import NotInitializedError
from awesomelog.logger.options import with_caller, with_format, with_level
from awesomelog.logger.types import Level, LogFormat


def _records(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines() if line]


@pytest.fixture
def restore_root_logger():
    """测试结束后恢复标准库根 logger 的 handler 与级别。"""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestBeforeInitialize:
    """测试初始化之前的使用错误。"""

    def test_logging_raises(self, reset_facade):
        """测试未初始化时调用全局日志函数抛出 NotInitializedError。"""
        facade.shutdown()
        assert facade.is_initialized() is False

        with pytest.raises(NotInitializedError):
            facade.info("too early")
        with pytest.raises(NotInitializedError):
            facade.default()

    def test_error_is_runtime_error(self, reset_facade):
        facade.shutdown()
        with pytest.raises(RuntimeError):
            awesomelog.warn("too early")


class TestInitialize:
    """测试 initialize 与全局便捷函数。"""

    def test_global_functions(self, reset_facade, capsys):
        """测试初始化后全局函数写入默认 logger。"""
        facade.initialize(with_format("json"), with_level("debug"))
        facade.debug("d")
        facade.info("user {}", "login", user="admin")
        facade.warning("w")
        facade.log("error", "e")
        facade.sync()

        records = _records(capsys)
        assert [r["level"] for r in records] == ["DEBUG", "INFO", "WARN", "ERROR"]
        assert records[1]["msg"] == "user login"
        assert records[1]["user"] == "admin"
        assert records[1]["logger"] == ""
        assert records[1]["func"] == "test_global_functions"

    def test_level_threshold(self, reset_facade, capsys):
        facade.initialize(with_format("json"), with_level("warn"))
        facade.info("dropped")
        facade.error("kept")

        records = _records(capsys)
        assert len(records) == 1
        assert records[0]["msg"] == "kept"

    def test_reinitialize_closes_previous(self, reset_facade, tmp_path):
        """测试重复初始化会关闭旧实例并切换到新配置。"""
        from awesomelog.logger.options import with_file_rotation

        first = facade.initialize(
            with_file_rotation(str(tmp_path / "app.log"), 1, 0, 0, False)
        )
        second = facade.initialize(with_level("debug"))

        assert first.closed is True
        assert second.closed is False
        assert facade.default() is second
        assert facade.default().config.level is Level.DEBUG

    def test_failed_initialize_keeps_previous(self, reset_facade, tmp_path):
        """测试文件无法创建时 initialize 失败，原默认 logger 不变。"""
        from awesomelog.logger.base import SinkError
        from awesomelog.logger.options import with_file_rotation

        current = facade.initialize()
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with pytest.raises(SinkError):
            facade.initialize(with_file_rotation(str(blocker / "app.log"), 1, 1, 1, False))
        assert facade.default() is current
        assert current.closed is False


class TestNamedLoggers:
    """测试命名 logger 对全局配置的继承。"""

    def test_get_logger_inherits_global_config(self, reset_facade):
        facade.initialize(with_level("debug"), with_format("json"))
        logger = facade.get_logger("svc")

        assert logger.config.level is Level.DEBUG
        assert logger.config.format is LogFormat.JSON

    def test_new_logger_applies_options(self, reset_facade):
        """测试 new_logger 在全局配置基础上再应用选项。"""
        facade.initialize(with_level("debug"), with_format("json"))
        logger = facade.new_logger("svc", with_level("error"), with_caller(False))

        assert logger.config.level is Level.ERROR
        assert logger.config.format is LogFormat.JSON
        assert logger.config.record_caller is False

    def test_existing_name_ignores_options(self, reset_facade):
        facade.initialize()
        first = facade.new_logger("svc", with_level("error"))
        second = facade.new_logger("svc", with_level("debug"))

        assert second is first
        assert second.config.level is Level.ERROR

    def test_get_logger_and_default_are_separate(self, reset_facade, capsys):
        """测试命名 logger 与默认 logger 的记录互不重复。"""
        facade.initialize(with_format("json"))
        facade.get_logger("svc").info("named")
        facade.info("anonymous")

        records = _records(capsys)
        assert [(r["logger"], r["msg"]) for r in records] == [
            ("svc", "named"),
            ("", "anonymous"),
        ]


class TestLifecycle:
    """测试关闭与退出路径。"""

    def test_scoped(self):
        """测试 scoped 退出时关闭全部 logger。"""
        with facade.scoped(with_level("debug")) as logger:
            named = facade.get_logger("svc")
            assert facade.default() is logger

        assert facade.is_initialized() is False
        assert logger.closed is True
        assert named.closed is True

    def test_shutdown_forgets_named_loggers(self, reset_facade):
        facade.initialize()
        first = facade.get_logger("svc")
        facade.shutdown()
        facade.initialize()

        assert facade.get_logger("svc") is not first

    def test_fatal_exits_with_code_one(self, reset_facade, capsys):
        """测试全局 fatal 写出记录后以退出码 1 终止。"""
        facade.initialize(with_format("json"))

        with pytest.raises(SystemExit) as excinfo:
            facade.fatal("unrecoverable", code="E1")

        assert excinfo.value.code == 1
        record = _records(capsys)[0]
        assert record["level"] == "FATAL"
        assert record["code"] == "E1"


class TestInterceptStdlib:
    """测试标准库 logging 的转发。"""

    def test_forward_records(self, reset_facade, restore_root_logger, capsys):
        """测试标准库记录转发到默认 logger 并保留级别与来源。"""
        facade.initialize(with_format("json"), with_level("debug"))
        facade.intercept_stdlib()

        logging.getLogger("third.party").warning("disk %s%% full", 90)

        record = _records(capsys)[0]
        assert record["level"] == "WARN"
        assert record["msg"] == "disk 90% full"
        assert record["stdlib_logger"] == "third.party"
        assert record["func"] == "test_forward_records"

    def test_critical_does_not_exit(self, reset_facade, restore_root_logger, capsys):
        """测试标准库 CRITICAL 只记录为 FATAL，不会终止进程。"""
        facade.initialize(with_format("json"))
        facade.intercept_stdlib()

        logging.getLogger("third.party").critical("bad")

        assert _records(capsys)[0]["level"] == "FATAL"

    def test_dropped_after_shutdown(self, reset_facade, restore_root_logger):
        """测试默认 logger 关闭后标准库记录被丢弃而不是报错。"""
        facade.initialize()
        facade.intercept_stdlib()
        facade.shutdown()

        logging.getLogger("third.party").error("nobody listens")


class TestFieldNames:
    """测试全局函数的字段名不与参数冲突。"""

    def test_message_and_level_fields(self, reset_facade, capsys):
        facade.initialize(with_format("json"))
        facade.info("m", message="field")
        facade.log("info", "n", depth=2)

        first, second = _records(capsys)
        assert first["message"] == "field"
        assert second["depth"] == 2
