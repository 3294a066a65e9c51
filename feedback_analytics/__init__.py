"""Aggregation engine behind the feedback analytics charts."""

from feedback_analytics.aggregator import aggregate, aggregate_report
from feedback_analytics.charts import CHARTS, build_chart, get_chart
from feedback_analytics.export import export_to_delimited_text
from feedback_analytics.models import (AggregateResult, AggregationReport,
                                       FeedbackSnapshot)
from feedback_analytics.selection import SelectionCoordinator

__all__ = [
    'AggregateResult',
    'AggregationReport',
    'CHARTS',
    'FeedbackSnapshot',
    'SelectionCoordinator',
    'aggregate',
    'aggregate_report',
    'build_chart',
    'export_to_delimited_text',
    'get_chart',
]
