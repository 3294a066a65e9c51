"""Shared fixtures: snapshot factories, a small portal dataset and a Flask client."""

from __future__ import annotations

import csv

import pytest

from app import create_app
from config import SNAPSHOT_HEADERS
from feedback_analytics.models import FeedbackSnapshot

_DEFAULTS = {
    'academic_year': '2023-24',
    'department_id': 'D1',
    'department_name': 'Computer Engineering',
    'department_abbreviation': 'COMP',
    'semester_number': '3',
    'division_name': 'A',
    'subject_id': 'SUB1',
    'subject_name': 'Data Structures',
    'subject_abbreviation': 'DS',
    'faculty_id': 'F1',
    'faculty_name': 'Dr. Rao',
    'student_id': 'S1',
    'question_category_name': 'Teaching',
    'response_value': '8',
}


def _make_snapshot(**overrides):
    values = dict(_DEFAULTS)
    values.update(overrides)
    return FeedbackSnapshot(**values)


@pytest.fixture
def make_snapshot():
    """Factory building a snapshot with sensible defaults."""
    return _make_snapshot


def _row(**values):
    row = {
        'academicYearString': '2023-24',
        'departmentId': 'D1',
        'departmentName': 'Computer Engineering',
        'departmentAbbreviation': 'COMP',
        'semesterNumber': '3',
        'divisionName': 'A',
        'questionCategoryName': 'Teaching',
        'questionBatch': 'None',
        'batch': 'None',
    }
    row.update(values)
    return row


@pytest.fixture
def sample_rows():
    """Portal export rows covering lecture/lab, zero, free-text and a missing abbreviation."""
    return [
        _row(subjectId='SUB1', subjectName='Data Structures', subjectAbbreviation='DS',
             facultyId='F1', facultyName='Dr. Rao', studentId='S1', responseValue='8'),
        _row(subjectId='SUB1', subjectName='Data Structures', subjectAbbreviation='DS',
             facultyId='F1', facultyName='Dr. Rao', studentId='S2', responseValue='6'),
        _row(subjectId='SUB1', subjectName='Data Structures', subjectAbbreviation='DS',
             facultyId='F1', facultyName='Dr. Rao', studentId='S1', responseValue='10',
             questionCategoryName='Laboratory', questionBatch='B1', batch='B1'),
        _row(subjectId='SUB1', subjectName='Data Structures', subjectAbbreviation='DS',
             facultyId='F2', facultyName='Dr. Mehta', studentId='S3', responseValue='9'),
        _row(subjectId='SUB2', subjectName='Operating Systems', subjectAbbreviation='OS',
             facultyId='F3', facultyName='Dr. Iyer', studentId='S1', responseValue='7',
             semesterNumber='5', academicYearString='2024-25'),
        _row(subjectId='SUB2', subjectName='Operating Systems', subjectAbbreviation='OS',
             facultyId='F3', facultyName='Dr. Iyer', studentId='S2', responseValue='0',
             semesterNumber='5', academicYearString='2024-25'),
        _row(subjectId='SUB3', subjectName='Computer Networks', subjectAbbreviation='',
             facultyId='F4', facultyName='Dr. Shah', studentId='S3', responseValue='Good teaching',
             questionCategoryName='Comments', semesterNumber='5', academicYearString='2024-25'),
    ]


@pytest.fixture
def sample_snapshots(sample_rows):
    return [FeedbackSnapshot.from_row(row) for row in sample_rows]


@pytest.fixture
def write_snapshot_csv(tmp_path):
    """Write rows to a snapshot CSV in the portal's column layout and return its path."""

    def _write(rows, name='snapshots.csv'):
        path = tmp_path / name
        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=SNAPSHOT_HEADERS)
            writer.writeheader()
            for row in rows:
                writer.writerow({header: row.get(header, '') for header in SNAPSHOT_HEADERS})
        return str(path)

    return _write


@pytest.fixture
def client(write_snapshot_csv, sample_rows):
    app = create_app({'SNAPSHOT_FILE': write_snapshot_csv(sample_rows), 'TESTING': True})
    with app.test_client() as test_client:
        yield test_client
