"""Metric data models"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from enum import Enum


class MetricType(Enum):
    """Prometheus metric types"""
    COUNTER = "counter"
    GAUGE = "gauge"


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """Join the non-empty parts of a metric name with underscores"""
    return "_".join(part for part in (namespace, subsystem, name) if part)


@dataclass(frozen=True)
class MetricDescriptor:
    """Immutable description of a metric family"""
    fq_name: str
    help_text: str
    label_names: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.fq_name:
            raise ValueError("Metric descriptor requires a name")
        # Accept any sequence, store a tuple so the descriptor stays hashable
        object.__setattr__(self, "label_names", tuple(self.label_names))


@dataclass(frozen=True)
class Metric:
    """Single measurement for a descriptor"""
    descriptor: MetricDescriptor
    value: float
    label_values: Tuple[str, ...] = ()
    metric_type: MetricType = MetricType.GAUGE
    timestamp: Optional[float] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "label_values", tuple(self.label_values))
        object.__setattr__(self, "value", float(self.value))
        if len(self.label_values) != len(self.descriptor.label_names):
            raise ValueError(
                f"{self.descriptor.fq_name}: expected {len(self.descriptor.label_names)} "
                f"label values, got {len(self.label_values)}"
            )

    @classmethod
    def gauge(cls, descriptor: MetricDescriptor, value: float, *label_values: str) -> "Metric":
        return cls(descriptor=descriptor, value=value, label_values=label_values)

    @property
    def name(self) -> str:
        return self.descriptor.fq_name

    @property
    def help_text(self) -> str:
        return self.descriptor.help_text

    @property
    def labels(self) -> Dict[str, str]:
        """Label names mapped to their values"""
        return dict(zip(self.descriptor.label_names, self.label_values))
