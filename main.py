#!/usr/bin/env python3
"""Main entry point for the log shipper process exporter"""
import sys
import time
from config import Config
from collectors import build_default_registry
from metrics.scraper import Scraper
from logging_config import (
    setup_structured_logging,
    get_logger,
    log_scrape_completed,
    log_server_startup,
    log_error,
)


def run_scrape(scraper: Scraper, logger) -> None:
    """Run one scrape and log what it produced"""
    result = scraper.scrape()
    for metric in result.metrics:
        logger.debug("Metric", name=metric.name, labels=metric.labels, value=metric.value,
                     metric_type=metric.metric_type.value)
    log_scrape_completed(logger, len(result.metrics), result.duration, len(result.failed_collectors))


def main():
    """Main application entry point"""
    try:
        config = Config()
        setup_structured_logging(config)
        logger = get_logger(__name__)

        registry = build_default_registry(config)
        scraper = Scraper(registry, config)
        log_server_startup(logger, config, list(scraper.collectors))
    except Exception as e:
        log_error(get_logger(__name__), e, {"component": "main", "phase": "startup"})
        sys.exit(1)

    try:
        while True:
            run_scrape(scraper, logger)
            if config.run_once:
                break
            time.sleep(config.collection_interval)
    except KeyboardInterrupt:
        logger.info("Exporter stopped", event_type="shutdown")
    finally:
        scraper.shutdown()


if __name__ == '__main__':
    main()
