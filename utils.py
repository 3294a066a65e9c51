import csv
import logging
import os

from feedback_analytics.models import FeedbackSnapshot

logger = logging.getLogger(__name__)

# Request filter name -> snapshot attribute it matches against
SNAPSHOT_FILTERS = {
    'academic_year': 'academic_year',
    'department': 'department_name',
    'semester': 'semester_number',
    'division': 'division_name',
}


def read_csv_rows(filename):
    """Return every row of the CSV file as a dict, or [] if the file is missing."""
    if not os.path.exists(filename):
        logger.warning("Snapshot file %s not found", filename)
        return []
    with open(filename, newline='', encoding='utf-8') as f:
        return list(csv.DictReader(f))


def normalize_semester(semester):
    """Normalize semester string by removing 'semester' prefix if present."""
    semester = str(semester or '').strip()
    if semester.lower().startswith("semester"):
        semester = semester[len("semester"):].strip()
    return semester


def matches_filters(snapshot, filters):
    """True when the snapshot matches every non-empty filter value."""
    for name, wanted in filters.items():
        if not wanted or name not in SNAPSHOT_FILTERS:
            continue
        actual = getattr(snapshot, SNAPSHOT_FILTERS[name])
        if name == 'semester':
            if normalize_semester(actual) != normalize_semester(wanted):
                return False
        elif str(actual or '').strip() != wanted.strip():
            return False
    return True


def load_snapshots(filename, filters=None):
    """
    Read feedback snapshots from the portal's CSV export.

    Rows are kept as-is apart from whitespace trimming; the analytics layer
    decides what is usable.
    """
    filters = filters or {}
    snapshots = []
    for row in read_csv_rows(filename):
        snapshot = FeedbackSnapshot.from_row(row)
        if matches_filters(snapshot, filters):
            snapshots.append(snapshot)
    logger.info("Loaded %d snapshots from %s (filters: %s)",
                len(snapshots), filename, {k: v for k, v in filters.items() if v})
    return snapshots
