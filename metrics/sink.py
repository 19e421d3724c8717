"""Shared metric channel written to by collectors during a scrape"""
import queue
import threading
from typing import Dict, List
from .models import Metric, MetricDescriptor


class DescriptorConflictError(ValueError):
    """Two descriptors share a name but disagree on help text or labels"""


class MetricSink:
    """Many-producer, single-consumer metric channel.

    Collectors only ever call ``send``. The scraper owns the sink and drains
    it; producers never close it.
    """

    def __init__(self):
        self._queue: "queue.Queue[Metric]" = queue.Queue()
        self._descriptors: Dict[str, MetricDescriptor] = {}
        self._lock = threading.Lock()

    def send(self, metric: Metric) -> None:
        """Publish a metric, rejecting descriptor conflicts"""
        descriptor = metric.descriptor
        with self._lock:
            known = self._descriptors.setdefault(descriptor.fq_name, descriptor)
        if known != descriptor:
            raise DescriptorConflictError(
                f"Metric {descriptor.fq_name} already described with labels "
                f"{list(known.label_names)} and help {known.help_text!r}, got labels "
                f"{list(descriptor.label_names)} and help {descriptor.help_text!r}"
            )
        self._queue.put(metric)

    def drain(self) -> List[Metric]:
        """Remove and return every metric sent so far"""
        metrics = []
        while True:
            try:
                metrics.append(self._queue.get_nowait())
            except queue.Empty:
                return metrics

    def __len__(self) -> int:
        return self._queue.qsize()
