"""Collectors and the default registry population"""
from .base import BaseCollector, CollectorError, Deadline
from .process import ProcessCollector, new_rsyslog_collector
from .filebeat import FilebeatCollector, new_filebeat_collector, parse_harvester_running
from .strategies.host import PgrepProcessLister, JournalctlLogReader
from metrics.registry import CollectorRegistry


def build_default_registry(config) -> CollectorRegistry:
    """Create a registry holding every built-in collector.

    Raises DuplicateCollectorError if two collectors claim the same name.
    """
    registry = CollectorRegistry()
    lister = PgrepProcessLister(config.pgrep_path)
    reader = JournalctlLogReader(config.journalctl_path)

    registry.register(
        "rsyslog",
        True,
        lambda logger: new_rsyslog_collector(
            logger,
            namespace=config.namespace,
            command_name=config.rsyslog_command,
            lister=lister,
        ),
    )
    registry.register(
        "filebeat",
        True,
        lambda logger: new_filebeat_collector(
            logger,
            namespace=config.namespace,
            command_name=config.filebeat_command,
            unit=config.filebeat_unit,
            window_lines=config.log_window_lines,
            lister=lister,
            reader=reader,
        ),
    )
    return registry


__all__ = [
    'BaseCollector',
    'CollectorError',
    'Deadline',
    'ProcessCollector',
    'FilebeatCollector',
    'new_rsyslog_collector',
    'new_filebeat_collector',
    'parse_harvester_running',
    'build_default_registry',
]
