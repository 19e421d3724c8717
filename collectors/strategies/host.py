"""Host queries backed by pgrep and journalctl"""
import logging
import subprocess
from typing import List, Optional
from .base import ProcessLister, LogWindowReader, StrategyResult

logger = logging.getLogger(__name__)

# pgrep exit status when no process matched
PGREP_NO_MATCH = 1


def run_command(args: List[str], timeout: Optional[float] = None) -> subprocess.CompletedProcess:
    """Run an external utility and capture its text output"""
    if timeout is not None and timeout <= 0:
        raise subprocess.TimeoutExpired(args, timeout)
    return subprocess.run(args, capture_output=True, text=True, timeout=timeout, check=False)


class PgrepProcessLister(ProcessLister):
    """Query the process table with ``pgrep -x``"""

    def __init__(self, pgrep_path: str = "pgrep"):
        super().__init__(name="pgrep")
        self.pgrep_path = pgrep_path

    def find(self, command_name: str, timeout: Optional[float] = None) -> StrategyResult:
        args = [self.pgrep_path, "-x", command_name]
        try:
            result = run_command(args, timeout=timeout)
        except subprocess.TimeoutExpired:
            return self._create_failure_result([f"pgrep timed out after {timeout}s"])
        except OSError as e:
            return self._create_failure_result([f"Could not run pgrep: {e}"])

        if result.returncode == 0:
            pids = [int(pid) for pid in result.stdout.split() if pid.isdigit()]
            return self._create_success_result({"pids": pids})
        if result.returncode == PGREP_NO_MATCH:
            return self._create_not_found_result(f"No process named {command_name}")

        stderr = result.stderr.strip()
        return self._create_failure_result(
            [f"pgrep exited with status {result.returncode}" + (f": {stderr}" if stderr else "")]
        )


class JournalctlLogReader(LogWindowReader):
    """Read the tail of a systemd unit's journal"""

    def __init__(self, journalctl_path: str = "journalctl"):
        super().__init__(name="journalctl")
        self.journalctl_path = journalctl_path

    def read_window(self, unit: str, lines: int, timeout: Optional[float] = None) -> StrategyResult:
        args = [self.journalctl_path, "-u", unit, "-n", str(lines), "--no-pager"]
        try:
            result = run_command(args, timeout=timeout)
        except subprocess.TimeoutExpired:
            return self._create_failure_result([f"journalctl timed out after {timeout}s"])
        except OSError as e:
            return self._create_failure_result([f"Could not run journalctl: {e}"])

        if result.returncode != 0:
            stderr = result.stderr.strip()
            return self._create_failure_result(
                [f"journalctl exited with status {result.returncode}" + (f": {stderr}" if stderr else "")]
            )

        window = result.stdout.splitlines()
        logger.debug("Read %d journal lines for %s", len(window), unit)
        return self._create_success_result({"lines": window[-lines:]})
