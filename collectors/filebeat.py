"""Filebeat liveness and harvester collector.

Filebeat periodically logs a monitoring line carrying its internal metrics,
for example::

    INFO [monitoring] log/log.go:184 Non-zero metrics in the last 30s
    {"monitoring": {"metrics": {"filebeat": {"harvester": {"open_files": 3, "running": 3}}}}}

The ``running`` harvester count of the most recent such line in the journal
is exported as ``<namespace>_filebeat_openfiles``.
"""
import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Optional
from .base import CollectorError, Deadline
from .process import ProcessCollector
from .strategies.base import LogWindowReader, ProcessLister
from .strategies.host import JournalctlLogReader
from metrics.models import Metric, MetricDescriptor, build_fq_name
from metrics.sink import MetricSink


DEFAULT_WINDOW_LINES = 100

MONITORING_MARKER = "monitoring"

# harvester field opening, JSON ("harvester":{) or text (harvester {) style
HARVESTER_OPEN = re.compile(r"""harvester["']?\s*[:=]?\s*\{""")
RUNNING_VALUE = re.compile(r"""(?<![\w])["']?running["']?\s*[:=]\s*(?P<token>[^,}\s]*)""")
# decimal or exponent notation, plus the Inf/NaN spellings log agents emit
NUMBER_TOKEN = re.compile(r"^[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)$", re.IGNORECASE)


class ParseOutcome(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class HarvesterStatus:
    """Outcome of looking for the harvester running count in a log window"""
    outcome: ParseOutcome
    value: Optional[float] = None
    token: Optional[str] = None
    line: Optional[str] = None

    @property
    def gauge_value(self) -> float:
        return self.value if self.outcome == ParseOutcome.FOUND else 0.0


def is_monitoring_line(line: str) -> bool:
    return MONITORING_MARKER in line


def _find_running_in_json(payload: Any) -> Any:
    """Breadth-first search for ``harvester.running`` in decoded JSON"""
    pending = [payload]
    while pending:
        node = pending.pop(0)
        if not isinstance(node, dict):
            continue
        harvester = node.get("harvester")
        if isinstance(harvester, dict) and "running" in harvester:
            return harvester["running"]
        pending.extend(child for child in node.values() if isinstance(child, dict))
    return None


def _harvester_bodies(line: str) -> Iterator[str]:
    """Text between each ``harvester {`` and its matching close brace"""
    for opening in HARVESTER_OPEN.finditer(line):
        depth = 1
        start = opening.end()
        end = len(line)
        for index in range(start, len(line)):
            if line[index] == "{":
                depth += 1
            elif line[index] == "}":
                depth -= 1
                if depth == 0:
                    end = index
                    break
        yield line[start:end]


def _running_token(line: str) -> Optional[str]:
    """Raw ``running`` token of the harvester field, or None when absent"""
    start = line.find("{")
    if start >= 0:
        try:
            payload, _ = json.JSONDecoder().raw_decode(line[start:])
        except (ValueError, RecursionError):
            payload = None
        found = _find_running_in_json(payload)
        if found is not None:
            return str(found)

    for body in _harvester_bodies(line):
        running = RUNNING_VALUE.search(body)
        if running is not None:
            return running.group("token").strip("\"'")
    return None


def parse_harvester_running(lines: Iterable[str]) -> HarvesterStatus:
    """Extract ``harvester.running`` from the last monitoring line"""
    last = None
    for line in lines:
        if is_monitoring_line(line):
            last = line
    if last is None:
        return HarvesterStatus(ParseOutcome.NOT_FOUND)

    token = _running_token(last)
    if token is None:
        return HarvesterStatus(ParseOutcome.NOT_FOUND, line=last)

    if not NUMBER_TOKEN.match(token):
        return HarvesterStatus(ParseOutcome.MALFORMED, token=token, line=last)
    return HarvesterStatus(ParseOutcome.FOUND, value=float(token), token=token, line=last)


class FilebeatCollector(ProcessCollector):
    """Filebeat liveness plus the open harvester count from its journal"""

    def __init__(self, namespace: str = "node", command_name: str = "filebeat", unit: str = "filebeat",
                 window_lines: int = DEFAULT_WINDOW_LINES, lister: Optional[ProcessLister] = None,
                 reader: Optional[LogWindowReader] = None, logger=None):
        if window_lines < 1:
            raise CollectorError(f"Journal window must hold at least one line, got {window_lines}")
        if not unit:
            raise CollectorError("filebeat journal unit must not be empty")
        super().__init__("filebeat", namespace=namespace, command_name=command_name,
                         lister=lister, logger=logger)
        self.unit = unit
        self.window_lines = window_lines
        self.reader = reader or JournalctlLogReader()
        self.openfiles_desc = MetricDescriptor(
            fq_name=build_fq_name(namespace, self.process_name, "openfiles"),
            help_text="Filebeat monitoring log harvester openfiles running.",
        )

    def update(self, sink: MetricSink, deadline: Optional[Deadline] = None) -> None:
        super().update(sink, deadline)
        sink.send(Metric.gauge(self.openfiles_desc, self.check_status(deadline)))

    def check_status(self, deadline: Optional[Deadline] = None) -> float:
        """Open harvester count, 0.0 when it cannot be determined"""
        result = self.reader.read_window(self.unit, self.window_lines, timeout=self._call_timeout(deadline))
        if not result.is_success:
            self.logger.warning(
                "Could not read monitoring log",
                unit=self.unit,
                method=result.method_used,
                errors=result.errors,
            )
            return 0.0

        status = parse_harvester_running(result.data.get("lines", []))
        if status.outcome == ParseOutcome.NOT_FOUND:
            self.logger.info(
                "No harvester status in monitoring log, please check the process",
                unit=self.unit,
                window_lines=self.window_lines,
            )
        elif status.outcome == ParseOutcome.MALFORMED:
            self.logger.warning("Malformed harvester running value", unit=self.unit, token=status.token)
        return status.gauge_value


def new_filebeat_collector(logger=None, **kwargs) -> FilebeatCollector:
    """Factory for the filebeat collector"""
    return FilebeatCollector(logger=logger, **kwargs)
