"""Geometry for the soft X-ray flux chart.

The chart is drawn as inline SVG by templates/sxr_chart.html; this module
only works out where everything goes.
"""
import logging
import math
from datetime import datetime, timedelta, timezone

import settings

logger = logging.getLogger(__name__)

ASPECT_RATIO = 600 / 200
PADDING = 40
WINDOW = timedelta(hours=6)
MAX_POINTS = 100
FLUX_FLOOR = 1e-8
GRID_LINES = 4
TIME_LABELS = 5

FLUX_FIELDS = ('flux', 'flux_avg', 'xrsa', 'xrsb')

THRESHOLDS = [
    {'value': 1e-7, 'label': 'B', 'color': '#3498db'},
    {'value': 1e-6, 'label': 'C', 'color': '#f1c40f'},
    {'value': 1e-5, 'label': 'M', 'color': '#f39c12'},
    {'value': 1e-4, 'label': 'X', 'color': '#e74c3c'},
]


def _point_time(point):
    value = point.get('time_tag') or point.get('time')
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def point_flux(point):
    flux = 0
    for field in FLUX_FIELDS:
        if point.get(field):
            flux = point[field]
            break
    try:
        return float(flux)
    except (TypeError, ValueError):
        return 0.0


def recent_points(xray_data, now=None):
    """Points from the last six hours (at most the last 100), oldest first."""
    now = now or datetime.now(timezone.utc)
    cutoff = now - WINDOW
    recent = []
    for point in xray_data:
        if not isinstance(point, dict):
            continue
        point_time = _point_time(point)
        if point_time is not None and point_time >= cutoff:
            recent.append((point_time, point))
    return recent[-MAX_POINTS:]


def build_sxr_chart(xray_data, width=600, now=None):
    """Returns chart geometry for `xray_data`, or None when there's nothing to draw."""
    if not xray_data or not isinstance(xray_data, list):
        return None

    recent = recent_points(xray_data, now)
    if not recent:
        logger.info('No x-ray flux points in the last six hours.')
        return None

    width = float(width)
    height = width / ASPECT_RATIO
    chart_width = width - 2 * PADDING
    chart_height = height - 2 * PADDING

    flux_data = [point_flux(point) for _, point in recent]
    times = [point_time for point_time, _ in recent]

    positive = [f for f in flux_data if f > 0]
    min_flux = min(positive) if positive else FLUX_FLOOR
    max_flux = max(flux_data)

    log_min = math.log10(max(min_flux, FLUX_FLOOR))
    log_max = math.log10(max(max_flux, FLUX_FLOOR))
    if log_max <= log_min:
        log_max = log_min + 1
    log_range = log_max - log_min

    def y_for(flux):
        normalized = (math.log10(flux) - log_min) / log_range
        return height - PADDING - normalized * chart_height

    n = len(recent)
    step = chart_width / (n - 1) if n > 1 else 0.0
    line = [
        (round(PADDING + step * i, 2), round(y_for(flux), 2))
        for i, flux in enumerate(flux_data) if flux > 0
    ]

    grid = [round(PADDING + (chart_height / GRID_LINES) * i, 2) for i in range(GRID_LINES + 1)]

    thresholds = [
        dict(threshold, y=round(y_for(threshold['value']), 2))
        for threshold in THRESHOLDS if threshold['value'] <= max_flux
    ]

    tz = settings.display_tz()
    time_labels = []
    for i in range(TIME_LABELS + 1):
        index = math.floor((n - 1) * (i / TIME_LABELS))
        time_labels.append({
            'x': round(PADDING + (chart_width / TIME_LABELS) * i, 2),
            'label': times[index].astimezone(tz).strftime('%H:%M'),
        })

    return {
        'width': width,
        'height': height,
        'padding': PADDING,
        'grid': grid,
        'points': ' '.join(f'{x},{y}' for x, y in line),
        'thresholds': thresholds,
        'time_labels': time_labels,
        'label_y': height - PADDING + 20,
        'y_label': 'X-Ray Flux (W/m²)',
        'min_flux': min_flux,
        'max_flux': max_flux,
        'count': n,
    }
