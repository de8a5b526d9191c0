"""测试公共 fixture。"""

import pytest

from awesomelog.logger import Registry
from awesomelog.logger import facade


class ExitRecorder:
    """替代 sys.exit，记录退出码而不真正退出。"""

    def __init__(self):
        self.codes = []

    def __call__(self, code):
        self.codes.append(code)


@pytest.fixture
def exit_recorder():
    return ExitRecorder()


@pytest.fixture
def registry(exit_recorder):
    """独立的注册表，测试结束后关闭全部实例。"""
    reg = Registry(exit_func=exit_recorder)
    yield reg
    reg.close()


@pytest.fixture
def reset_facade():
    """测试结束后清理全局默认 logger。"""
    yield
    facade.shutdown()
