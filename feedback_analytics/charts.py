"""Chart configurations built on the generic aggregation, plus dashboard summaries."""

from __future__ import annotations

import math
from typing import NamedTuple, Optional, Tuple

from config import ENGAGEMENT_RESPONSES_PER_POINT, ENGAGEMENT_SCORE_MAX
from exceptions import UnknownChartError
from feedback_analytics import export as cols
from feedback_analytics.aggregator import (LECTURE_LAB_SPLIT, Split,
                                           aggregate, aggregate_report,
                                           check_snapshots)
from feedback_analytics.keys import resolve_key
from feedback_analytics.models import as_snapshot
from feedback_analytics.statistics import (is_included, mean_rating,
                                           natural_key, parse_rating)


class ChartSpec(NamedTuple):
    name: str
    title: str
    axis: Tuple[str, ...]
    columns: Tuple[cols.Column, ...]
    order: Optional[str] = None
    scope_axis: Optional[str] = None
    split: Optional[Split] = LECTURE_LAB_SPLIT

    @property
    def scoped(self):
        return self.scope_axis is not None


def engagement_score(response_count):
    """One point per few responses, capped; halves round up."""
    points = math.floor(response_count / ENGAGEMENT_RESPONSES_PER_POINT + 0.5)
    return min(ENGAGEMENT_SCORE_MAX, points)


CHARTS = {}


def register(spec):
    CHARTS[spec.name] = spec
    return spec


register(ChartSpec(
    name='subject_ratings',
    title='Subject Ratings (Lecture vs Lab)',
    axis=('subject', 'faculty'),
    columns=(
        cols.label('subject', 'Subject'),
        cols.detail('Subject Name', 'subject_names'),
        cols.label('faculty', 'Faculty'),
        cols.average('Lecture Average', 'lecture'),
        cols.average('Lab Average', 'lab'),
        cols.average('Overall Average'),
        cols.count('Lecture Responses', 'lecture'),
        cols.count('Lab Responses', 'lab'),
        cols.count('Overall Responses'),
    ),
))

register(ChartSpec(
    name='subject_faculty',
    title='Faculty Performance by Subject',
    axis=('faculty',),
    scope_axis='subject',
    columns=(
        cols.label('faculty', 'Faculty Name'),
        cols.average('Average Rating'),
        cols.count('Rated Responses'),
        cols.responses('Total Responses'),
    ),
))

register(ChartSpec(
    name='semester_trends',
    title='Semester Trends',
    axis=('semester', 'subject'),
    order='key',
    columns=(
        cols.label('semester', 'Semester'),
        cols.label('subject', 'Subject'),
        cols.detail('Academic Years', 'academic_years'),
        cols.average('Average Rating'),
        cols.responses('Responses'),
    ),
))

register(ChartSpec(
    name='division_batch',
    title='Division and Batch Comparison',
    axis=('division', 'batch'),
    order='key',
    columns=(
        cols.label('division', 'Division'),
        cols.label('batch', 'Batch'),
        cols.average('Average Rating'),
        cols.responses('Responses'),
        cols.Column('Engagement Score', lambda result: engagement_score(result.response_count())),
    ),
))

register(ChartSpec(
    name='faculty_performance',
    title='Faculty Performance',
    axis=('faculty', 'academic_year'),
    columns=(
        cols.label('faculty', 'Faculty'),
        cols.label('academic_year', 'Academic Year'),
        cols.average('Average Rating'),
        cols.count('Rated Responses'),
        cols.responses('Total Responses'),
    ),
))

register(ChartSpec(
    name='academic_year_departments',
    title='Department Performance by Academic Year',
    axis=('academic_year', 'department'),
    order='key',
    columns=(
        cols.label('academic_year', 'Academic Year'),
        cols.label('department', 'Department'),
        cols.average('Average Rating'),
        cols.responses('Responses'),
    ),
))

register(ChartSpec(
    name='academic_year_divisions',
    title='Division Performance by Academic Year',
    axis=('academic_year', 'division'),
    order='key',
    columns=(
        cols.label('academic_year', 'Academic Year'),
        cols.label('division', 'Division'),
        cols.average('Average Rating'),
        cols.responses('Responses'),
    ),
))

register(ChartSpec(
    name='academic_year_semesters',
    title='Semester Performance by Academic Year',
    axis=('semester', 'academic_year'),
    order='key',
    columns=(
        cols.label('semester', 'Semester'),
        cols.label('academic_year', 'Academic Year'),
        cols.average('Average Rating'),
        cols.responses('Responses'),
    ),
))

register(ChartSpec(
    name='lecture_lab',
    title='Lecture vs Lab',
    axis=('lecture_type',),
    order='key',
    split=None,
    columns=(
        cols.label('lecture_type', 'Type'),
        cols.average('Average Rating'),
        cols.count('Rated Responses'),
        cols.responses('Total Responses'),
    ),
))

# Extra display fields some charts want beyond the defaults
CHART_DETAILS = {
    'semester_trends': {'subject_names': 'subject_name', 'academic_years': 'academic_year'},
}


def get_chart(name):
    try:
        return CHARTS[name]
    except KeyError:
        raise UnknownChartError(name) from None


def build_chart(name, snapshots, scope=None):
    """Aggregate *snapshots* the way chart *name* displays them."""
    spec = get_chart(name)
    if not spec.scoped:
        scope = None
    elif scope is None:
        # A focused chart shows nothing until a scope is chosen
        check_snapshots(snapshots)
        snapshots = []
    return aggregate_report(
        snapshots,
        spec.axis,
        scope=scope,
        scope_axis=spec.scope_axis or 'subject',
        split=spec.split,
        details=CHART_DETAILS.get(name),
        order=spec.order,
    )


def scope_overview(snapshots, scope, scope_axis='subject'):
    """Pooled summary of every response inside *scope*, or None when it has none."""
    if scope is None:
        return None
    results = aggregate(snapshots, scope_axis, scope=scope, scope_axis=scope_axis)
    return results[0] if results else None


def overall_stats(snapshots):
    """Headline numbers for the dashboard cards."""
    check_snapshots(snapshots)
    records = [s for s in (as_snapshot(r) for r in snapshots) if s is not None]
    ratings = [parse_rating(s.response_value) for s in records]

    def unique(attr):
        return len({getattr(s, attr) for s in records if getattr(s, attr) not in (None, '')})

    return {
        'total_responses': len(records),
        'average_rating': mean_rating([r for r in ratings if is_included(r)]),
        'unique_subjects': unique('subject_id'),
        'unique_faculties': unique('faculty_id'),
        'unique_students': unique('student_id'),
        'unique_departments': unique('department_id'),
    }


def filtering_options(snapshots):
    """Sorted distinct values for the filter dropdowns."""
    check_snapshots(snapshots)
    records = [s for s in (as_snapshot(r) for r in snapshots) if s is not None]

    def distinct(axis):
        values = {resolve_key(s, axis) for s in records}
        values.discard(None)
        return sorted(values, key=natural_key)

    return {
        'academic_years': distinct('academic_year'),
        'departments': distinct('department'),
        'subjects': distinct('subject'),
        'semesters': distinct('semester'),
        'divisions': distinct('division'),
    }
