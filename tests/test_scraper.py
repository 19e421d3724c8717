"""Tests for scrape orchestration"""
import threading
import pytest

from config import Config
from collectors.base import BaseCollector, CollectorError
from collectors.filebeat import FilebeatCollector
from collectors.process import ProcessCollector
from collectors.strategies.base import StrategyStatus
from metrics.registry import CollectorRegistry
from metrics.scraper import Scraper

from conftest import FakeLogReader, FakeProcessLister


class FailingCollector(BaseCollector):
    def __init__(self, logger=None):
        super().__init__("broken", logger)

    def update(self, sink, deadline=None):
        raise CollectorError("misconfigured")


class BlockingCollector(BaseCollector):
    def __init__(self, release: threading.Event, logger=None):
        super().__init__("slow", logger)
        self.release = release

    def update(self, sink, deadline=None):
        self.release.wait(5)


class TestScraper:
    """Test running collectors against one sink"""

    def setup_method(self):
        self.config = Config(namespace="node", scrape_timeout=5.0, max_workers=4)
        self.registry = CollectorRegistry()
        self.scraper = None

    def teardown_method(self):
        if self.scraper:
            self.scraper.shutdown()

    def register_defaults(self, lines):
        self.registry.register(
            "rsyslog", True,
            lambda logger: ProcessCollector("rsyslog", lister=FakeProcessLister(StrategyStatus.SUCCESS), logger=logger),
        )
        self.registry.register(
            "filebeat", True,
            lambda logger: FilebeatCollector(
                lister=FakeProcessLister(StrategyStatus.NOT_FOUND),
                reader=FakeLogReader(lines),
                logger=logger,
            ),
        )

    def test_scrape_collects_all(self, make_monitoring_line):
        self.register_defaults([make_monitoring_line(4)])
        self.scraper = Scraper(self.registry, self.config)

        result = self.scraper.scrape()

        values = {(m.name, m.label_values): m.value for m in result.metrics}
        assert values[("node_rsyslog_up", ("rsyslog",))] == 1.0
        assert values[("node_filebeat_up", ("filebeat",))] == 0.0
        assert values[("node_filebeat_openfiles", ())] == 4.0
        assert values[("node_scrape_collector_success", ("rsyslog",))] == 1.0
        assert values[("node_scrape_collector_success", ("filebeat",))] == 1.0
        assert ("node_scrape_collector_duration_seconds", ("filebeat",)) in values
        assert len(result.metrics) == 3 + 4
        assert result.failed_collectors == []

    def test_disabled_collectors_are_not_built(self):
        self.register_defaults([])
        self.registry.register("broken", False, FailingCollector)
        self.config = Config(disabled_collectors_str="filebeat")
        self.scraper = Scraper(self.registry, self.config)

        assert list(self.scraper.collectors) == ["rsyslog"]
        status = self.scraper.get_collector_status()
        assert status["filebeat"]["enabled"] is False
        assert status["broken"]["default_enabled"] is False

    def test_failure_is_isolated(self):
        self.register_defaults([])
        self.registry.register("broken", True, FailingCollector)
        self.scraper = Scraper(self.registry, self.config)

        result = self.scraper.scrape()

        assert result.failed_collectors == ["broken"]
        assert result.outcomes["broken"].error == "misconfigured"
        values = {(m.name, m.label_values): m.value for m in result.metrics}
        assert values[("node_scrape_collector_success", ("broken",))] == 0.0
        assert values[("node_rsyslog_up", ("rsyslog",))] == 1.0

    def test_slow_collector_times_out(self):
        release = threading.Event()
        self.registry.register("slow", True, lambda logger: BlockingCollector(release, logger))
        self.register_defaults([])
        self.config = Config(scrape_timeout=0.2)
        self.scraper = Scraper(self.registry, self.config)

        try:
            result = self.scraper.scrape()
        finally:
            release.set()

        assert result.outcomes["slow"].success is False
        assert "timed out" in result.outcomes["slow"].error
        assert result.outcomes["rsyslog"].success is True

    def test_factory_error_is_fatal(self):
        def factory(logger):
            raise CollectorError("bad config")

        self.registry.register("bad", True, factory)

        with pytest.raises(CollectorError):
            Scraper(self.registry, self.config)

    def test_each_scrape_queries_again(self):
        lister = FakeProcessLister(StrategyStatus.SUCCESS, StrategyStatus.NOT_FOUND)
        self.registry.register("rsyslog", True, lambda logger: ProcessCollector("rsyslog", lister=lister, logger=logger))
        self.scraper = Scraper(self.registry, self.config)

        first = self.scraper.scrape()
        second = self.scraper.scrape()

        def up(result):
            return [m.value for m in result.metrics if m.name == "node_rsyslog_up"]

        assert up(first) == [1.0]
        assert up(second) == [0.0]
