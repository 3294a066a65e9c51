"""Grouping keys for snapshots along the supported axes."""

from config import (LAB, LAB_CATEGORY_MARKERS, LECTURE, NO_BATCH_VALUES,
                    UNCLASSIFIED)

# Axis name -> snapshot attributes tried in order; the first non-empty one wins.
AXIS_FIELDS = {
    'subject': ('subject_abbreviation', 'subject_name'),
    'faculty': ('faculty_name',),
    'department': ('department_abbreviation', 'department_name'),
    'division': ('division_name',),
    'semester': ('semester_number',),
    'academic_year': ('academic_year',),
    'question_category': ('question_category_name',),
}

LECTURE_TYPES = (LECTURE, LAB)
AXES = tuple(AXIS_FIELDS) + ('batch', 'lecture_type')


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def first_present(snapshot, fields):
    """Return the first non-empty attribute of *snapshot* named in *fields*."""
    for name in fields:
        value = _clean(getattr(snapshot, name, None))
        if value is not None:
            return value
    return None


def has_batch(value):
    value = _clean(value)
    return value is not None and value.lower() not in NO_BATCH_VALUES


def resolve_lecture_type(snapshot):
    """
    Classify a snapshot as LECTURE or LAB.

    An explicit designator wins; an unrecognised one is UNCLASSIFIED rather
    than guessed. Otherwise a lab-like question category or a question batch
    marks the response as LAB.
    """
    explicit = _clean(snapshot.lecture_type)
    if explicit is not None:
        explicit = explicit.upper()
        return explicit if explicit in LECTURE_TYPES else UNCLASSIFIED

    category = (_clean(snapshot.question_category_name) or '').lower()
    if any(marker in category for marker in LAB_CATEGORY_MARKERS):
        return LAB
    if has_batch(snapshot.question_batch):
        return LAB
    return LECTURE


def resolve_key(snapshot, axis):
    """Return the key of *snapshot* along *axis*, or None when the dimension is missing."""
    if axis == 'lecture_type':
        return resolve_lecture_type(snapshot)
    if axis == 'batch':
        batch = _clean(snapshot.batch)
        return batch.lower() if has_batch(batch) else None
    try:
        fields = AXIS_FIELDS[axis]
    except KeyError:
        raise ValueError(f"Unknown grouping axis: {axis!r}") from None
    return first_present(snapshot, fields)


def normalize_axes(axis):
    """Accept one axis name or a sequence of them; validate and return a tuple."""
    axes = (axis,) if isinstance(axis, str) else tuple(axis)
    if not axes:
        raise ValueError("At least one grouping axis is required")
    for name in axes:
        if name not in AXES:
            raise ValueError(f"Unknown grouping axis: {name!r}")
    return axes


def group_key(snapshot, axes):
    """Composite key for *snapshot*, or None if any of its *axes* is missing."""
    key = []
    for axis in axes:
        value = resolve_key(snapshot, axis)
        if value is None:
            return None
        key.append(value)
    return tuple(key)
