"""Configuration for the log shipper process exporter"""
import re
from pathlib import Path
from typing import List, Literal, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

METRIC_NAME_PART = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def split_list(value: str) -> List[str]:
    """Parse a comma-separated list"""
    return [item.strip() for item in value.split(',') if item.strip()]


class Config(BaseSettings):
    """Environment-based settings with Pydantic validation"""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # Core settings
    namespace: str = Field(default="node", description="Metric name prefix")
    collection_interval: int = Field(default=30, ge=1, description="Collection interval in seconds")
    scrape_timeout: float = Field(default=10.0, gt=0, description="Deadline for one scrape in seconds")
    max_workers: int = Field(default=4, ge=1, description="Worker threads running collectors")
    run_once: bool = Field(default=False, description="Scrape once and exit")

    # Collection settings
    enabled_collectors_str: str = Field(default="", description="Collectors forced on (comma-separated)")
    disabled_collectors_str: str = Field(default="", description="Collectors forced off (comma-separated)")

    # Host query settings
    rsyslog_command: str = Field(default="rsyslogd", min_length=1, description="rsyslog command name")
    filebeat_command: str = Field(default="filebeat", min_length=1, description="filebeat command name")
    filebeat_unit: str = Field(default="filebeat", min_length=1, description="filebeat systemd unit")
    log_window_lines: int = Field(default=100, ge=1, description="Journal lines searched for monitoring status")
    pgrep_path: str = Field(default="pgrep", description="pgrep executable")
    journalctl_path: str = Field(default="journalctl", description="journalctl executable")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Log file path")

    # Service settings
    service_name: str = Field(default="logship-exporter", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")

    @field_validator('namespace')
    @classmethod
    def validate_namespace(cls, v):
        """Namespace must be usable as a metric name prefix"""
        if v and not METRIC_NAME_PART.match(v):
            raise ValueError(f"Invalid metric namespace: {v!r}")
        return v

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator('log_file')
    @classmethod
    def ensure_parent_directories(cls, v):
        """Ensure parent directories exist for file paths"""
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    @property
    def enabled_collectors(self) -> List[str]:
        """Get force-enabled collectors as a list"""
        return split_list(self.enabled_collectors_str)

    @property
    def disabled_collectors(self) -> List[str]:
        """Get force-disabled collectors as a list"""
        return split_list(self.disabled_collectors_str)

    def is_collector_enabled(self, collector_name: str, default: bool = True) -> bool:
        """Check if a collector runs, falling back to its registered default"""
        if collector_name in self.disabled_collectors:
            return False
        if collector_name in self.enabled_collectors:
            return True
        return default
