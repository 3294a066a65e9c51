"""Turn rating accumulators into reportable averages and counts."""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

from config import RATING_PRECISION, RATING_SCALE_MAX
from feedback_analytics.models import OVERALL, AggregateResult

QUANTUM = Decimal(1).scaleb(-RATING_PRECISION)


def round_rating(value):
    """Round half-up to the reporting precision (8.125 -> 8.13, not banker's 8.12)."""
    return float(Decimal(str(value)).quantize(QUANTUM, rounding=ROUND_HALF_UP))


def parse_rating(value):
    """
    Return the numeric rating carried by a response value, or None.

    Accepts numbers, numeric text and ``{"score": n}`` objects. Free text,
    non-finite numbers and values outside 0..RATING_SCALE_MAX yield None.
    A zero is returned as 0.0 so callers can tell "not answered" from garbage.
    """
    if isinstance(value, Mapping):
        value = value.get('score')
        if isinstance(value, str):
            return None
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0 or number > RATING_SCALE_MAX:
        return None
    return number


def is_included(rating):
    """Only present, strictly positive ratings count toward an average; 0 means no rating."""
    return rating is not None and rating > 0


def mean_rating(ratings):
    """Average of *ratings* at reporting precision, or None for an empty list."""
    if not ratings:
        return None
    total = sum(Decimal(str(r)) for r in ratings)
    mean = round_rating(total / len(ratings))
    # Included ratings are positive, so a defined mean never shows as 0.00.
    return max(mean, float(QUANTUM))


def finalize(accumulator, axes, sub_categories=()):
    """Build the immutable result row for one accumulator."""
    names = [OVERALL] + list(sub_categories)
    names += sorted(n for n in accumulator.ratings if n not in names)

    averages = {}
    counts = {}
    responses = {}
    for name in names:
        ratings = accumulator.ratings.get(name, [])
        averages[name] = mean_rating(ratings)
        counts[name] = len(ratings)
        responses[name] = accumulator.responses.get(name, 0)

    details = {
        name: ', '.join(sorted(values))
        for name, values in accumulator.details.items()
    }
    return AggregateResult(
        key=accumulator.key,
        labels=dict(zip(axes, accumulator.key)),
        averages=averages,
        counts=counts,
        responses=responses,
        details=details,
    )


def natural_key(value):
    """Sort key putting numeric strings in numeric order ahead of text."""
    text = str(value)
    try:
        return (0, float(text), '')
    except ValueError:
        return (1, 0.0, text.lower())


def by_rating(result):
    average = result.average()
    return (average is None, -(average or 0.0), [natural_key(k) for k in result.key])


def by_key(result):
    return [natural_key(k) for k in result.key]


def sort_results(results, order='rating'):
    """
    Order finalized rows for presentation.

    ``rating``: best overall average first, unavailable averages last, ties by
    group name. ``key``: ascending by group key (trend charts, focused views).
    """
    if order == 'rating':
        return sorted(results, key=by_rating)
    if order == 'key':
        return sorted(results, key=by_key)
    raise ValueError(f"Unknown sort order: {order!r}")
