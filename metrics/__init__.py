"""Metric models, the shared sink and the collector registry"""
from .models import Metric, MetricDescriptor, MetricType, build_fq_name
from .sink import MetricSink, DescriptorConflictError
from .registry import CollectorRegistry, DuplicateCollectorError, Registration

__all__ = [
    'Metric',
    'MetricDescriptor',
    'MetricType',
    'build_fq_name',
    'MetricSink',
    'DescriptorConflictError',
    'CollectorRegistry',
    'DuplicateCollectorError',
    'Registration',
]
