"""Process liveness collector"""
from typing import Optional
from .base import BaseCollector, CollectorError, Deadline
from .strategies.base import ProcessLister, StrategyStatus
from .strategies.host import PgrepProcessLister
from metrics.models import Metric, MetricDescriptor, build_fq_name
from metrics.sink import MetricSink


class ProcessCollector(BaseCollector):
    """Report whether a named process is running as a 0/1 gauge"""

    def __init__(self, process_name: str, namespace: str = "node", command_name: Optional[str] = None,
                 lister: Optional[ProcessLister] = None, logger=None):
        super().__init__(process_name, logger, f"Liveness of the {process_name} process")
        self.process_name = process_name
        self.command_name = command_name or process_name
        self.namespace = namespace
        self.lister = lister or PgrepProcessLister()
        self.up_desc = MetricDescriptor(
            fq_name=build_fq_name(namespace, process_name, "up"),
            help_text=f"Value is 1 if {process_name} process is 'up', 0 otherwise.",
            label_names=("process_name",),
        )

    def update(self, sink: MetricSink, deadline: Optional[Deadline] = None) -> None:
        alive = self.check_process(deadline)
        sink.send(Metric.gauge(self.up_desc, 1.0 if alive else 0.0, self.process_name))

    def check_process(self, deadline: Optional[Deadline] = None) -> bool:
        """True when the process table holds an exact command name match"""
        result = self.lister.find(self.command_name, timeout=self._call_timeout(deadline))

        if result.status == StrategyStatus.SUCCESS:
            self.logger.debug("Process is up", command=self.command_name, pids=result.data.get("pids", []))
            return True
        if result.status == StrategyStatus.NOT_FOUND:
            self.logger.debug("Process is not running", command=self.command_name)
            return False

        # Could not determine; reported as down
        self.logger.warning(
            "Process query unavailable",
            command=self.command_name,
            method=result.method_used,
            errors=result.errors,
        )
        return False


def new_rsyslog_collector(logger=None, namespace: str = "node", command_name: str = "rsyslogd",
                          lister: Optional[ProcessLister] = None) -> ProcessCollector:
    """Factory for the rsyslog liveness collector"""
    if not command_name:
        raise CollectorError("rsyslog command name must not be empty")
    return ProcessCollector("rsyslog", namespace=namespace, command_name=command_name,
                            lister=lister, logger=logger)
