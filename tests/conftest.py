"""Shared fixtures and fake host queries"""
import threading
from typing import List, Optional
import pytest

from collectors.strategies.base import LogWindowReader, ProcessLister, StrategyResult, StrategyStatus


class FakeProcessLister(ProcessLister):
    """Answers from a scripted list, repeating the last answer"""

    def __init__(self, *answers: StrategyStatus):
        super().__init__(name="fake")
        self.answers = list(answers) or [StrategyStatus.SUCCESS]
        self.calls: List[tuple] = []
        self._lock = threading.Lock()

    def find(self, command_name: str, timeout: Optional[float] = None) -> StrategyResult:
        with self._lock:
            self.calls.append((command_name, timeout))
            status = self.answers.pop(0) if len(self.answers) > 1 else self.answers[0]
        if status == StrategyStatus.SUCCESS:
            return self._create_success_result({"pids": [4242]})
        if status == StrategyStatus.NOT_FOUND:
            return self._create_not_found_result(f"No process named {command_name}")
        return self._create_failure_result(["permission denied"])


class FakeLogReader(LogWindowReader):
    """Returns a fixed window, or fails when constructed with an error"""

    def __init__(self, lines: Optional[List[str]] = None, error: Optional[str] = None):
        super().__init__(name="fake")
        self.lines = lines or []
        self.error = error
        self.calls: List[tuple] = []

    def read_window(self, unit: str, lines: int, timeout: Optional[float] = None) -> StrategyResult:
        self.calls.append((unit, lines, timeout))
        if self.error:
            return self._create_failure_result([self.error])
        return self._create_success_result({"lines": self.lines[-lines:]})


def monitoring_line(running) -> str:
    return (
        '2024-05-02T10:00:00.000Z\tINFO\t[monitoring]\tlog/log.go:184\tNon-zero metrics in the last 30s\t'
        '{"monitoring": {"metrics": {"filebeat": {"events": {"active": 0}, '
        '"harvester": {"open_files": 2, "running": %s}}}}}' % running
    )


@pytest.fixture
def up_lister():
    return FakeProcessLister(StrategyStatus.SUCCESS)


@pytest.fixture
def down_lister():
    return FakeProcessLister(StrategyStatus.NOT_FOUND)


@pytest.fixture
def make_monitoring_line():
    return monitoring_line
