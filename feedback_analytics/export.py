"""Delimited-text export of the aggregate rows currently on screen."""

from __future__ import annotations

import csv
import io
import logging
from typing import Callable, NamedTuple

from config import EXPORT_DELIMITER, NOT_AVAILABLE, RATING_PRECISION
from exceptions import NothingToExportError
from feedback_analytics.models import OVERALL

logger = logging.getLogger(__name__)


class Column(NamedTuple):
    header: str
    value: Callable


def label(axis, header):
    return Column(header, lambda result: result.labels.get(axis, ''))


def average(header, name=OVERALL):
    return Column(header, lambda result: result.average(name))


def count(header, name=OVERALL):
    return Column(header, lambda result: result.count(name))


def responses(header, name=OVERALL):
    return Column(header, lambda result: result.response_count(name))


def detail(header, name):
    return Column(header, lambda result: result.details.get(name, ''))


def format_value(value):
    """Render one cell: missing averages as N/A, floats at rating precision."""
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        return f"{value:.{RATING_PRECISION}f}"
    return str(value)


def export_rows(results, columns):
    """Header row followed by one formatted row per result."""
    rows = [[column.header for column in columns]]
    for result in results:
        rows.append([format_value(column.value(result)) for column in columns])
    return rows


def export_to_delimited_text(results, columns, delimiter=EXPORT_DELIMITER):
    """
    Serialize the visible *results* with a fixed column schema.

    Only the rows passed in are written, so the file matches what is on
    screen. Raises NothingToExportError instead of producing a header-only file.
    """
    if not results:
        raise NothingToExportError()
    if not columns:
        raise ValueError("An export needs at least one column")

    output = io.StringIO()
    writer = csv.writer(output, delimiter=delimiter, lineterminator='\n',
                        quoting=csv.QUOTE_MINIMAL)
    writer.writerows(export_rows(results, columns))
    logger.info("Exported %d rows with %d columns", len(results), len(columns))
    return output.getvalue()
