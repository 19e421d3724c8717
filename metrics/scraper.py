"""Scrape orchestration: run enabled collectors in parallel against one sink"""
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from .models import Metric, MetricDescriptor, build_fq_name
from .registry import CollectorRegistry
from .sink import MetricSink
from collectors.base import BaseCollector, Deadline
from logging_config import get_logger


logger = get_logger(__name__)


@dataclass
class CollectorOutcome:
    """How one collector fared during a scrape"""
    success: bool
    duration: float
    error: Optional[str] = None


@dataclass
class ScrapeResult:
    """Metrics and per-collector outcomes of one scrape"""
    metrics: List[Metric] = field(default_factory=list)
    outcomes: Dict[str, CollectorOutcome] = field(default_factory=dict)
    duration: float = 0.0

    @property
    def failed_collectors(self) -> List[str]:
        return [name for name, outcome in self.outcomes.items() if not outcome.success]


class Scraper:
    """Builds the enabled collectors once and runs them on every scrape"""

    def __init__(self, registry: CollectorRegistry, config, max_workers: Optional[int] = None):
        self.registry = registry
        self.config = config
        self.collectors: Dict[str, BaseCollector] = self._build_collectors()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or config.max_workers,
            thread_name_prefix="collector",
        )
        self.duration_desc = MetricDescriptor(
            fq_name=build_fq_name(config.namespace, "scrape", "collector_duration_seconds"),
            help_text="node_exporter: Duration of a collector scrape.",
            label_names=("collector",),
        )
        self.success_desc = MetricDescriptor(
            fq_name=build_fq_name(config.namespace, "scrape", "collector_success"),
            help_text="node_exporter: Whether a collector succeeded.",
            label_names=("collector",),
        )

    def _build_collectors(self) -> Dict[str, BaseCollector]:
        """Construct every enabled collector from its registered factory"""
        collectors = {}
        for registration in self.registry.registrations():
            if not self.config.is_collector_enabled(registration.name, registration.default_enabled):
                logger.info("Collector disabled", collector=registration.name)
                continue
            collector_logger = get_logger("collector").bind(collector=registration.name)
            collectors[registration.name] = registration.factory(collector_logger)
            logger.info("Enabled collector", collector=registration.name)
        return collectors

    def _run_collector(self, name: str, collector: BaseCollector, sink: MetricSink,
                       deadline: Deadline) -> CollectorOutcome:
        start = time.monotonic()
        try:
            collector.update(sink, deadline)
        except Exception as e:
            duration = time.monotonic() - start
            logger.error("Collector failed", collector=name, duration_seconds=round(duration, 3),
                         error=str(e), event_type="collection_error", exc_info=True)
            return CollectorOutcome(success=False, duration=duration, error=str(e))

        duration = time.monotonic() - start
        logger.debug("Collector succeeded", collector=name, duration_seconds=round(duration, 3),
                     event_type="collection_complete")
        return CollectorOutcome(success=True, duration=duration)

    def scrape(self) -> ScrapeResult:
        """Run every enabled collector once and drain the shared sink"""
        sink = MetricSink()
        deadline = Deadline(self.config.scrape_timeout)
        start = time.monotonic()

        futures = {
            self._executor.submit(self._run_collector, name, collector, sink, deadline): name
            for name, collector in self.collectors.items()
        }
        done, not_done = wait(futures, timeout=deadline.remaining())

        outcomes = {}
        for future in done:
            outcomes[futures[future]] = future.result()
        for future in not_done:
            name = futures[future]
            future.cancel()
            logger.error("Collector timed out", collector=name, timeout=self.config.scrape_timeout,
                         event_type="collection_timeout")
            outcomes[name] = CollectorOutcome(
                success=False,
                duration=time.monotonic() - start,
                error=f"timed out after {self.config.scrape_timeout}s",
            )

        for name in self.collectors:
            outcome = outcomes[name]
            sink.send(Metric.gauge(self.duration_desc, outcome.duration, name))
            sink.send(Metric.gauge(self.success_desc, 1.0 if outcome.success else 0.0, name))

        return ScrapeResult(
            metrics=sink.drain(),
            outcomes={name: outcomes[name] for name in self.collectors},
            duration=time.monotonic() - start,
        )

    def get_collector_status(self) -> Dict[str, Dict]:
        """Get status information for all registered collectors"""
        status = {}
        for registration in self.registry.registrations():
            collector = self.collectors.get(registration.name)
            status[registration.name] = {
                "enabled": collector is not None,
                "default_enabled": registration.default_enabled,
                "class": collector.__class__.__name__ if collector else None,
                "help": collector.help_text if collector else None,
            }
        return status

    def shutdown(self) -> None:
        """Stop the worker pool without waiting on hung collectors"""
        self._executor.shutdown(wait=False)
