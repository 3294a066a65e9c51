"""Data structures for the feedback analytics pipeline."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

OVERALL = 'overall'

# attribute name -> column name used by the portal's snapshot export
SNAPSHOT_FIELDS = {
    'id': 'id',
    'academic_year_id': 'academicYearId',
    'academic_year': 'academicYearString',
    'department_id': 'departmentId',
    'department_name': 'departmentName',
    'department_abbreviation': 'departmentAbbreviation',
    'semester_id': 'semesterId',
    'semester_number': 'semesterNumber',
    'division_id': 'divisionId',
    'division_name': 'divisionName',
    'subject_id': 'subjectId',
    'subject_name': 'subjectName',
    'subject_abbreviation': 'subjectAbbreviation',
    'subject_code': 'subjectCode',
    'faculty_id': 'facultyId',
    'faculty_name': 'facultyName',
    'faculty_abbreviation': 'facultyAbbreviation',
    'student_id': 'studentId',
    'question_id': 'questionId',
    'question_type': 'questionType',
    'question_category_id': 'questionCategoryId',
    'question_category_name': 'questionCategoryName',
    'question_batch': 'questionBatch',
    'lecture_type': 'lectureType',
    'batch': 'batch',
    'response_value': 'responseValue',
    'submitted_at': 'submittedAt',
}


@dataclass(frozen=True, slots=True)
class FeedbackSnapshot:
    """One student's answer to one question, flattened with all its context."""

    id: Optional[str] = None
    academic_year_id: Optional[str] = None
    academic_year: Optional[str] = None
    department_id: Optional[str] = None
    department_name: Optional[str] = None
    department_abbreviation: Optional[str] = None
    semester_id: Optional[str] = None
    semester_number: Any = None
    division_id: Optional[str] = None
    division_name: Optional[str] = None
    subject_id: Optional[str] = None
    subject_name: Optional[str] = None
    subject_abbreviation: Optional[str] = None
    subject_code: Optional[str] = None
    faculty_id: Optional[str] = None
    faculty_name: Optional[str] = None
    faculty_abbreviation: Optional[str] = None
    student_id: Optional[str] = None
    question_id: Optional[str] = None
    question_type: Optional[str] = None
    question_category_id: Optional[str] = None
    question_category_name: Optional[str] = None
    question_batch: Optional[str] = None
    lecture_type: Optional[str] = None
    batch: Optional[str] = None
    response_value: Any = None
    submitted_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping) -> FeedbackSnapshot:
        """Build a snapshot from a CSV/JSON row keyed by camelCase or snake_case names.

        Unknown keys are ignored and absent ones stay ``None``.
        """
        values = {}
        for attr, column in SNAPSHOT_FIELDS.items():
            value = row.get(column, row.get(attr))
            if isinstance(value, str):
                value = value.strip()
            values[attr] = value
        return cls(**values)


def as_snapshot(record) -> Optional[FeedbackSnapshot]:
    """Return *record* as a snapshot, or None when it cannot be one."""
    if isinstance(record, FeedbackSnapshot):
        return record
    if isinstance(record, Mapping):
        return FeedbackSnapshot.from_row(record)
    return None


@dataclass(slots=True)
class RatingAccumulator:
    """Running state for one group until it is finalized."""

    key: Tuple[str, ...]
    ratings: Dict[str, List[float]] = field(default_factory=dict)
    responses: Counter = field(default_factory=Counter)
    details: Dict[str, Set[str]] = field(default_factory=dict)

    def add(self, rating: Optional[float], sub_category: Optional[str], included: bool) -> None:
        """Record one response; *rating* only counts toward averages when *included*."""
        self.responses[OVERALL] += 1
        self.ratings.setdefault(OVERALL, [])
        if sub_category is not None:
            self.responses[sub_category] += 1
            self.ratings.setdefault(sub_category, [])
        if not included:
            return
        self.ratings[OVERALL].append(rating)
        if sub_category is not None:
            self.ratings[sub_category].append(rating)

    def note(self, name: str, value) -> None:
        if value in (None, ''):
            return
        self.details.setdefault(name, set()).add(str(value))


@dataclass(frozen=True, slots=True)
class AggregateResult:
    """Finalized summary row for one group. Never mutated after creation."""

    key: Tuple[str, ...]
    labels: Dict[str, str]
    averages: Dict[str, Optional[float]]
    counts: Dict[str, int]
    responses: Dict[str, int]
    details: Dict[str, str] = field(default_factory=dict)

    @property
    def label(self) -> str:
        return ' / '.join(self.key)

    def average(self, name: str = OVERALL) -> Optional[float]:
        return self.averages.get(name)

    def count(self, name: str = OVERALL) -> int:
        return self.counts.get(name, 0)

    def response_count(self, name: str = OVERALL) -> int:
        return self.responses.get(name, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': list(self.key),
            'labels': dict(self.labels),
            'averages': dict(self.averages),
            'counts': dict(self.counts),
            'responses': dict(self.responses),
            'details': dict(self.details),
        }


@dataclass(slots=True)
class AggregationReport:
    """Results of one aggregation pass plus its data-quality counters."""

    results: List[AggregateResult] = field(default_factory=list)
    unclassified: int = 0
    invalid_ratings: int = 0
    total: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.results
