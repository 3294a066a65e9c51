from flask import (Blueprint, render_template, request, redirect, url_for, flash,
                   send_file, session, jsonify, abort, current_app)
from exceptions import NothingToExportError, UnknownChartError
from feedback_analytics.charts import CHARTS, filtering_options, overall_stats
from feedback_analytics.export import export_rows
from feedback_analytics.selection import SelectionCoordinator
from utils import load_snapshots
from config import EXPORT_MIMETYPE, RATING_SCALE_MAX
from datetime import datetime
import io
import logging
import textwrap
import matplotlib
import matplotlib.pyplot as plt

matplotlib.use('Agg')

analytics_bp = Blueprint('analytics', __name__)
logger = logging.getLogger(__name__)

FILTER_ARGS = ('academic_year', 'department', 'semester', 'division')


def current_filters():
    """Filter values from the query string; blank ones are dropped."""
    filters = {}
    for name in FILTER_ARGS:
        value = request.args.get(name, '').strip()
        if value:
            filters[name] = value
    return filters


def safe_filename_part(value):
    return str(value).replace(' ', '_').replace('/', '_')


def remember_scope(chart_name, scope):
    scopes = dict(session.get('scopes', {}))
    if scope is None:
        scopes.pop(chart_name, None)
    else:
        scopes[chart_name] = scope
    session['scopes'] = scopes


def load_coordinator(chart_name, filters):
    """Selection state for *chart_name* over freshly loaded snapshots, restoring the session's scope."""
    try:
        coordinator = SelectionCoordinator(chart_name)
    except UnknownChartError:
        abort(404)
    coordinator.refresh(load_snapshots(current_app.config['SNAPSHOT_FILE'], filters))
    stored = session.get('scopes', {}).get(chart_name)
    if stored is not None:
        coordinator.set_scope(stored)
    remember_scope(chart_name, coordinator.current_scope)
    return coordinator


def render_bar_chart(labels, values, title):
    """Horizontal bar chart of averages as PNG bytes."""
    labels = [textwrap.fill(label, width=15) for label in labels]

    fig, ax = plt.subplots(figsize=(14, 8), dpi=100)
    colors = plt.cm.viridis([value / RATING_SCALE_MAX for value in values])
    bars = ax.barh(labels, values, color=colors, edgecolor='black')

    ax.set_xlabel('Average Rating', fontsize=12, fontweight='bold')
    ax.set_title(f'{title}\n', fontsize=16, fontweight='bold', pad=20)
    ax.set_xlim(0, RATING_SCALE_MAX)
    ax.grid(True, axis='x', linestyle='--', alpha=0.7)

    for bar in bars:
        width = bar.get_width()
        ax.text(width + 0.1, bar.get_y() + bar.get_height()/2,
                f'{width:.2f}', va='center', ha='left', fontsize=10)

    plt.tight_layout()

    img_io = io.BytesIO()
    plt.savefig(img_io, format='png', bbox_inches='tight')
    img_io.seek(0)
    plt.close(fig)
    return img_io


@analytics_bp.route('/analytics')
def index():
    filters = current_filters()
    snapshots = load_snapshots(current_app.config['SNAPSHOT_FILE'], filters)
    return render_template('analytics_index.html',
                           charts=CHARTS.values(),
                           filters=filters,
                           options=filtering_options(snapshots),
                           stats=overall_stats(snapshots))


@analytics_bp.route('/analytics/<chart>')
def report(chart):
    filters = current_filters()
    coordinator = load_coordinator(chart, filters)
    result = coordinator.report()
    rows = export_rows(result.results, coordinator.chart.columns)

    return render_template('analytics_report.html',
                           chart=coordinator.chart,
                           filters=filters,
                           available_groups=coordinator.available_groups,
                           scope=coordinator.current_scope,
                           overview=coordinator.overview(),
                           report=result,
                           headers=rows[0],
                           rows=rows[1:],
                           date=datetime.now().strftime("%Y-%m-%d %H:%M"))


@analytics_bp.route('/analytics/<chart>/scope', methods=['POST'])
def select_scope(chart):
    filters = current_filters()
    coordinator = load_coordinator(chart, filters)
    if coordinator.set_scope(request.form.get('scope')):
        remember_scope(chart, coordinator.current_scope)
    return redirect(url_for('analytics.report', chart=chart, **filters))


@analytics_bp.route('/analytics/<chart>/data')
def chart_data(chart):
    coordinator = load_coordinator(chart, current_filters())
    result = coordinator.report()
    overview = coordinator.overview()
    return jsonify({
        'chart': coordinator.chart.name,
        'scope': coordinator.current_scope,
        'available_groups': coordinator.available_groups,
        'overview': overview.to_dict() if overview else None,
        'results': [row.to_dict() for row in result.results],
        'unclassified': result.unclassified,
        'invalid_ratings': result.invalid_ratings,
        'total': result.total,
    })


@analytics_bp.route('/analytics/<chart>/export')
def export_csv(chart):
    filters = current_filters()
    coordinator = load_coordinator(chart, filters)

    try:
        content = coordinator.export()
    except NothingToExportError as e:
        flash(str(e), "danger")
        return redirect(url_for('analytics.report', chart=chart, **filters))

    parts = [coordinator.chart.name]
    if coordinator.current_scope:
        parts.append(safe_filename_part(coordinator.current_scope))
    filename = '_'.join(parts) + '.csv'

    return send_file(
        io.BytesIO(content.encode('utf-8')),
        mimetype=EXPORT_MIMETYPE,
        as_attachment=True,
        download_name=filename
    )


@analytics_bp.route('/analytics/<chart>/graph')
def download_graph(chart):
    filters = current_filters()
    coordinator = load_coordinator(chart, filters)

    data = [(row.label, row.average()) for row in coordinator.results()
            if row.average() is not None]
    if not data:
        flash("No data available to generate graph.", "danger")
        return redirect(url_for('analytics.report', chart=chart, **filters))

    title = coordinator.chart.title
    if coordinator.current_scope:
        title = f'{title} - {coordinator.current_scope}'
    img_io = render_bar_chart([label for label, _ in data], [value for _, value in data], title)

    filename = f"{coordinator.chart.name}_graph.png"
    return send_file(
        img_io,
        mimetype='image/png',
        as_attachment=True,
        download_name=filename
    )
