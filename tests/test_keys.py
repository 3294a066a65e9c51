"""Unit tests for grouping key resolution."""

import pytest

from feedback_analytics.keys import (group_key, normalize_axes, resolve_key,
                                     resolve_lecture_type)


def test_subject_prefers_abbreviation(make_snapshot):
    snapshot = make_snapshot(subject_abbreviation='DS', subject_name='Data Structures')
    assert resolve_key(snapshot, 'subject') == 'DS'


@pytest.mark.parametrize('abbreviation', [None, '', '   '])
def test_subject_falls_back_to_name(make_snapshot, abbreviation):
    snapshot = make_snapshot(subject_abbreviation=abbreviation, subject_name=' Data Structures ')
    assert resolve_key(snapshot, 'subject') == 'Data Structures'


def test_missing_dimension_resolves_to_none(make_snapshot):
    snapshot = make_snapshot(subject_abbreviation=None, subject_name=None)
    assert resolve_key(snapshot, 'subject') is None


def test_faculty_uses_exact_name(make_snapshot):
    assert resolve_key(make_snapshot(faculty_name='Dr. Rao'), 'faculty') == 'Dr. Rao'
    assert resolve_key(make_snapshot(faculty_name='dr. rao'), 'faculty') == 'dr. rao'


def test_semester_number_becomes_text(make_snapshot):
    assert resolve_key(make_snapshot(semester_number=4), 'semester') == '4'


@pytest.mark.parametrize('overrides, expected', [
    ({'question_category_name': 'Teaching'}, 'LECTURE'),
    ({'question_category_name': 'Laboratory Work'}, 'LAB'),
    ({'question_category_name': 'Lab'}, 'LAB'),
    ({'question_batch': 'B2'}, 'LAB'),
    ({'question_batch': 'None'}, 'LECTURE'),
    ({'question_batch': '-'}, 'LECTURE'),
    ({'lecture_type': 'lab'}, 'LAB'),
    ({'lecture_type': 'LECTURE', 'question_category_name': 'Lab'}, 'LECTURE'),
    ({'lecture_type': 'tutorial'}, 'UNCLASSIFIED'),
])
def test_lecture_type(make_snapshot, overrides, expected):
    assert resolve_lecture_type(make_snapshot(**overrides)) == expected
    assert resolve_key(make_snapshot(**overrides), 'lecture_type') == expected


@pytest.mark.parametrize('batch, expected', [
    ('B1 ', 'b1'),
    ('none', None),
    ('None', None),
    ('-', None),
    ('', None),
    (None, None),
])
def test_batch_key(make_snapshot, batch, expected):
    assert resolve_key(make_snapshot(batch=batch), 'batch') == expected


def test_unknown_axis_is_rejected(make_snapshot):
    with pytest.raises(ValueError):
        resolve_key(make_snapshot(), 'colour')
    with pytest.raises(ValueError):
        normalize_axes(('subject', 'colour'))


def test_normalize_axes_accepts_name_or_sequence():
    assert normalize_axes('subject') == ('subject',)
    assert normalize_axes(['subject', 'faculty']) == ('subject', 'faculty')
    with pytest.raises(ValueError):
        normalize_axes(())


def test_group_key_is_composite(make_snapshot):
    snapshot = make_snapshot(subject_abbreviation='DS', faculty_name='Dr. Rao')
    assert group_key(snapshot, ('subject', 'faculty')) == ('DS', 'Dr. Rao')


def test_group_key_missing_part(make_snapshot):
    snapshot = make_snapshot(faculty_name='  ')
    assert group_key(snapshot, ('subject', 'faculty')) is None
