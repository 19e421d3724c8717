"""Base collector contract"""
import time
from abc import ABC, abstractmethod
from typing import Optional
from metrics.sink import MetricSink
from logging_config import get_logger


class CollectorError(Exception):
    """Raised by a collector when its metrics would be meaningless"""


class Deadline:
    """Point in monotonic time by which a scrape has to finish"""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self._expires_at = None if timeout is None else time.monotonic() + timeout

    def remaining(self) -> Optional[float]:
        """Seconds left, or None when unbounded"""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0


class BaseCollector(ABC):
    """Base class for all metric collectors.

    Collectors are stateless between scrapes: every ``update`` queries the host
    again and writes fresh metrics into the sink it is given.
    """

    def __init__(self, name: str, logger=None, help_text: str = ""):
        if not name:
            raise CollectorError("Collector name must not be empty")
        self._name = name
        self._help_text = help_text
        self.logger = logger or get_logger(__name__).bind(collector=name)

    @abstractmethod
    def update(self, sink: MetricSink, deadline: Optional[Deadline] = None) -> None:
        """Query the host and send metrics into ``sink``"""
        pass

    @property
    def name(self) -> str:
        return self._name

    @property
    def help_text(self) -> str:
        return self._help_text or f"{self.name} metrics collector"

    def _call_timeout(self, deadline: Optional[Deadline]) -> Optional[float]:
        """Timeout for the next host query, failing fast once the deadline passed"""
        if deadline is None:
            return None
        if deadline.expired:
            raise CollectorError(f"Scrape deadline exceeded before {self.name} could query the host")
        return deadline.remaining()
