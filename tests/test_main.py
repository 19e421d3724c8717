"""Tests for the exporter entry point"""
import os
from unittest.mock import patch
import pytest

import main
from collectors.process import ProcessCollector
from collectors.strategies.base import StrategyStatus
from metrics.registry import CollectorRegistry, DuplicateCollectorError
from metrics.scraper import Scraper

from conftest import FakeProcessLister


def fake_registry(config):
    registry = CollectorRegistry()
    lister = FakeProcessLister(StrategyStatus.SUCCESS)
    registry.register("rsyslog", True, lambda logger: ProcessCollector("rsyslog", lister=lister, logger=logger))
    return registry


class TestMain:
    """Test startup and the scrape loop"""

    @patch('main.setup_structured_logging')
    def test_duplicate_registration_exits(self, mock_setup):
        """A name collision while populating the registry stops the exporter"""
        with patch('main.build_default_registry', side_effect=DuplicateCollectorError("rsyslog")):
            with pytest.raises(SystemExit) as exc_info:
                main.main()

        assert exc_info.value.code == 1

    @patch('main.setup_structured_logging')
    @patch('main.time.sleep')
    def test_run_once_scrapes_once(self, mock_sleep, mock_setup):
        original_scrape = Scraper.scrape

        with patch.dict(os.environ, {"RUN_ONCE": "true"}), \
                patch('main.build_default_registry', side_effect=fake_registry), \
                patch.object(Scraper, 'scrape', autospec=True, side_effect=original_scrape) as mock_scrape, \
                patch.object(Scraper, 'shutdown', autospec=True) as mock_shutdown:
            main.main()

        assert mock_scrape.call_count == 1
        assert mock_shutdown.call_count == 1
        mock_sleep.assert_not_called()

    @patch('main.setup_structured_logging')
    def test_run_scrape_logs_summary(self, mock_setup):
        scraper = Scraper(fake_registry(None), main.Config())
        try:
            with patch('main.log_scrape_completed') as mock_log:
                main.run_scrape(scraper, main.get_logger("test"))
        finally:
            scraper.shutdown()

        logger, metrics_count, _, failed = mock_log.call_args[0]
        assert metrics_count == 3
        assert failed == 0
