"""Keeps a chart's selected scope valid and its aggregate in step with it."""

from __future__ import annotations

import logging

from config import EXPORT_DELIMITER
from feedback_analytics.aggregator import check_snapshots
from feedback_analytics.charts import build_chart, get_chart, scope_overview
from feedback_analytics.export import export_to_delimited_text
from feedback_analytics.keys import resolve_key
from feedback_analytics.models import as_snapshot

logger = logging.getLogger(__name__)


class SelectionCoordinator:
    """
    Selection state for one chart.

    ``available_groups`` is derived from the data on every ``refresh``; the
    current scope is corrected to the first available group whenever it is
    unset or no longer present, and cleared when the data is empty. Results
    are re-derived from scratch for each (data, scope) pair and cached only
    for that pair, so a view can never show another scope's numbers.
    """

    def __init__(self, chart='subject_faculty', snapshots=None):
        self.chart = get_chart(chart)
        self._snapshots = ()
        self._available = []
        self._scope = None
        self._version = 0
        self._cache_key = None
        self._cache = None
        if snapshots is not None:
            self.refresh(snapshots)

    @property
    def available_groups(self):
        return list(self._available)

    @property
    def current_scope(self):
        return self._scope

    @property
    def snapshots(self):
        return self._snapshots

    def refresh(self, snapshots):
        """Load a new snapshot set and re-validate the scope against it."""
        check_snapshots(snapshots)
        self._snapshots = tuple(snapshots)
        self._version += 1

        if self.chart.scoped:
            groups = set()
            for record in self._snapshots:
                snapshot = as_snapshot(record)
                key = resolve_key(snapshot, self.chart.scope_axis) if snapshot is not None else None
                if key is not None:
                    groups.add(key)
            self._available = sorted(groups)
        else:
            self._available = []

        if not self._available:
            self._scope = None
        elif self._scope not in self._available:
            previous = self._scope
            self._scope = self._available[0]
            if previous is not None:
                logger.info("Scope %r is gone from %s; switched to %r",
                            previous, self.chart.name, self._scope)
        return self._scope

    def set_scope(self, key):
        """Select *key* if it is an available group; anything else is ignored."""
        if key not in self._available:
            logger.debug("Ignoring unknown scope %r for %s", key, self.chart.name)
            return False
        self._scope = key
        return True

    def report(self):
        """Aggregation report for the current data and scope."""
        cache_key = (self._version, self._scope)
        if self._cache_key != cache_key:
            self._cache = build_chart(self.chart.name, list(self._snapshots), self._scope)
            self._cache_key = cache_key
        return self._cache

    def results(self):
        return list(self.report().results)

    def overview(self):
        """Pooled summary of the whole selected scope (e.g. the subject-wide average)."""
        if not self.chart.scoped:
            return None
        return scope_overview(list(self._snapshots), self._scope, self.chart.scope_axis)

    def export(self, delimiter=EXPORT_DELIMITER):
        """Delimited text of exactly the rows :meth:`results` shows."""
        return export_to_delimited_text(self.results(), self.chart.columns, delimiter)
