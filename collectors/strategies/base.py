"""Host query interfaces used by collectors to inspect host state"""
import abc
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from enum import Enum


class StrategyStatus(Enum):
    """Status of a host query"""
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    FAILURE = "failure"


@dataclass
class StrategyResult:
    """Result of a host query"""
    status: StrategyStatus
    data: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    method_used: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Check if the query answered positively"""
        return self.status == StrategyStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        """Check if the query could not determine anything"""
        return self.status == StrategyStatus.FAILURE


class CollectionStrategy(abc.ABC):
    """Shared result helpers for host query implementations"""

    def __init__(self, name: str):
        self.name = name

    def _create_success_result(self, data: Dict[str, Any]) -> StrategyResult:
        """Create a successful result"""
        return StrategyResult(status=StrategyStatus.SUCCESS, data=data, method_used=self.name)

    def _create_not_found_result(self, reason: str) -> StrategyResult:
        """Create a result for a confirmed absence"""
        return StrategyResult(status=StrategyStatus.NOT_FOUND, errors=[reason], method_used=self.name)

    def _create_failure_result(self, errors: List[str]) -> StrategyResult:
        """Create a failure result"""
        return StrategyResult(status=StrategyStatus.FAILURE, errors=errors, method_used=self.name)


class ProcessLister(CollectionStrategy):
    """Answers whether a process with an exact command name is running"""

    @abc.abstractmethod
    def find(self, command_name: str, timeout: Optional[float] = None) -> StrategyResult:
        """SUCCESS when running, NOT_FOUND when absent, FAILURE when unknown"""


class LogWindowReader(CollectionStrategy):
    """Reads the most recent lines of a service's log stream"""

    @abc.abstractmethod
    def read_window(self, unit: str, lines: int, timeout: Optional[float] = None) -> StrategyResult:
        """SUCCESS with ``data["lines"]`` or FAILURE when the stream is unreadable"""
