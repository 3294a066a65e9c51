"""Group feedback snapshots and fold their ratings into summary rows."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from exceptions import SnapshotInputError
from feedback_analytics.keys import (group_key, normalize_axes, resolve_key,
                                     resolve_lecture_type)
from feedback_analytics.models import (AggregationReport, RatingAccumulator,
                                       as_snapshot)
from feedback_analytics.statistics import (finalize, is_included,
                                           parse_rating, sort_results)

logger = logging.getLogger(__name__)


class Split(NamedTuple):
    """Sub-category splitter: the categories always reported plus the classifier."""

    categories: Tuple[str, ...]
    func: Callable


def lecture_lab_category(snapshot):
    return resolve_lecture_type(snapshot).lower()


LECTURE_LAB_SPLIT = Split(categories=('lecture', 'lab'), func=lecture_lab_category)

# Display-only fields collected per group: detail name -> snapshot attribute
DEFAULT_DETAILS = {
    'subject_names': 'subject_name',
    'faculty_names': 'faculty_name',
}


class Grouping(NamedTuple):
    accumulators: Dict[tuple, RatingAccumulator]
    unclassified: int
    invalid_ratings: int
    total: int


def check_snapshots(snapshots):
    """Reject inputs that are not a list/tuple of records; individual records are never rejected here."""
    if not isinstance(snapshots, (list, tuple)):
        raise SnapshotInputError(
            f"Expected a list of feedback snapshots, got {type(snapshots).__name__}"
        )


def _has_response(value):
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def group_ratings(snapshots, key_func, include=is_included, split: Optional[Split] = None,
                  details: Optional[Mapping] = None) -> Grouping:
    """
    Fold *snapshots* into one accumulator per key.

    *key_func* maps a snapshot to its group key or None when a grouping field
    is missing; such snapshots are counted as unclassified and skipped.
    Every response increments its group's counters; only ratings accepted by
    *include* are kept for averaging.
    """
    check_snapshots(snapshots)
    accumulators = {}
    unclassified = 0
    invalid = 0

    for record in snapshots:
        snapshot = as_snapshot(record)
        key = key_func(snapshot) if snapshot is not None else None
        if key is None:
            unclassified += 1
            continue

        accumulator = accumulators.get(key)
        if accumulator is None:
            accumulator = accumulators[key] = RatingAccumulator(key=key)

        rating = parse_rating(snapshot.response_value)
        if rating is None and _has_response(snapshot.response_value):
            invalid += 1

        sub_category = split.func(snapshot) if split is not None else None
        accumulator.add(rating, sub_category, include(rating))

        for name, attr in (details or {}).items():
            accumulator.note(name, getattr(snapshot, attr, None))

    return Grouping(accumulators, unclassified, invalid, len(snapshots))


def narrow(snapshots, scope, scope_axis='subject'):
    """Keep only the snapshots whose *scope_axis* key equals *scope*."""
    check_snapshots(snapshots)
    scoped = []
    for record in snapshots:
        snapshot = as_snapshot(record)
        if snapshot is not None and resolve_key(snapshot, scope_axis) == scope:
            scoped.append(snapshot)
    return scoped


def aggregate_report(snapshots, axis, scope=None, scope_axis='subject',
                     split: Optional[Split] = LECTURE_LAB_SPLIT,
                     details: Optional[Mapping] = None, order=None) -> AggregationReport:
    """Aggregate *snapshots* along *axis* and return results with data-quality counters."""
    axes = normalize_axes(axis)
    if scope is not None:
        snapshots = narrow(snapshots, scope, scope_axis)
    if details is None:
        details = DEFAULT_DETAILS
    if order is None:
        order = 'key' if scope is not None else 'rating'

    grouping = group_ratings(
        snapshots,
        key_func=lambda snapshot: group_key(snapshot, axes),
        split=split,
        details=details,
    )
    categories = split.categories if split is not None else ()
    results = [
        finalize(accumulator, axes, categories)
        for accumulator in grouping.accumulators.values()
    ]

    if grouping.unclassified:
        logger.warning(
            "%d of %d snapshots lack a value for %s and were left unclassified",
            grouping.unclassified, grouping.total, '/'.join(axes),
        )
    if grouping.invalid_ratings:
        logger.info("%d response values were not usable ratings", grouping.invalid_ratings)
    logger.debug("Aggregated %d snapshots into %d groups along %s",
                 grouping.total, len(results), axes)

    return AggregationReport(
        results=sort_results(results, order),
        unclassified=grouping.unclassified,
        invalid_ratings=grouping.invalid_ratings,
        total=grouping.total,
    )


def aggregate(snapshots, axis, scope=None, **options):
    """Aggregate *snapshots* along *axis* (a name or tuple of names), optionally narrowed to *scope*."""
    return aggregate_report(snapshots, axis, scope, **options).results
