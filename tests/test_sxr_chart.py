import math
from datetime import datetime, timedelta, timezone

import settings
from spaceweather_module import format_time
from sxr_chart import build_sxr_chart, point_flux, recent_points

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def series(fluxes, start=NOW - timedelta(hours=1), step=timedelta(minutes=1), field='flux'):
    return [
        {'time_tag': (start + step * i).strftime('%Y-%m-%dT%H:%M:%SZ'), field: flux}
        for i, flux in enumerate(fluxes)
    ]


def test_nothing_to_draw():
    assert build_sxr_chart(None, now=NOW) is None
    assert build_sxr_chart([], now=NOW) is None
    assert build_sxr_chart({'flux': 1e-6}, now=NOW) is None


def test_old_points_are_dropped():
    old = series([1e-6, 2e-6], start=NOW - timedelta(hours=8))
    assert build_sxr_chart(old, now=NOW) is None


def test_recent_points_window_and_limit():
    data = series([1e-6] * 300, start=NOW - timedelta(hours=5), step=timedelta(seconds=30))
    recent = recent_points(data, now=NOW)
    assert len(recent) == 100
    assert recent[-1][1] is data[-1]


def test_point_flux_field_fallbacks():
    assert point_flux({'flux': 2e-6}) == 2e-6
    assert point_flux({'flux': 0, 'xrsb': '3e-6'}) == 3e-6
    assert point_flux({'flux_avg': 'bogus'}) == 0.0
    assert point_flux({}) == 0.0


def test_geometry():
    chart = build_sxr_chart(series([1e-7, 1e-6, 1e-5]), width=600, now=NOW)
    assert chart['width'] == 600
    assert chart['height'] == 200
    assert chart['grid'] == [40, 70, 100, 130, 160]

    points = [tuple(map(float, p.split(','))) for p in chart['points'].split()]
    # lowest flux sits on the x axis, highest at the top of the plot area
    assert points[0] == (40.0, 160.0)
    assert points[1] == (300.0, 100.0)
    assert points[2] == (560.0, 40.0)

    assert [t['label'] for t in chart['thresholds']] == ['B', 'C', 'M']
    assert chart['thresholds'][0]['y'] == 160.0
    assert chart['thresholds'][0]['color'] == '#3498db'


def test_thresholds_only_below_max_flux():
    chart = build_sxr_chart(series([2e-7, 5e-7]), now=NOW)
    assert [t['label'] for t in chart['thresholds']] == ['B']


def test_time_labels():
    chart = build_sxr_chart(series([1e-6] * 11, step=timedelta(minutes=6)), now=NOW)
    labels = chart['time_labels']
    assert len(labels) == 6
    assert labels[0] == {'x': 40.0, 'label': '11:00'}
    assert labels[-1]['label'] == '12:00'
    assert labels[-1]['x'] == 560.0


def test_flat_series_does_not_divide_by_zero():
    chart = build_sxr_chart(series([1e-6, 1e-6, 1e-6]), now=NOW)
    ys = {float(p.split(',')[1]) for p in chart['points'].split()}
    assert ys == {160.0}


def test_single_point():
    chart = build_sxr_chart(series([3e-6]), now=NOW)
    assert chart['points'] == '40.0,160.0'
    assert len(chart['time_labels']) == 6


def test_zero_flux_points_are_skipped():
    chart = build_sxr_chart(series([0, 1e-6, 0, 1e-5]), now=NOW)
    assert len(chart['points'].split()) == 2
    assert math.isclose(chart['min_flux'], 1e-6)


def test_all_zero_flux():
    chart = build_sxr_chart(series([0, 0]), now=NOW)
    assert chart['points'] == ''
    assert chart['thresholds'] == []


def test_time_labels_follow_display_timezone(monkeypatch):
    monkeypatch.setattr(settings, 'DISPLAY_TZ', 'America/New_York')
    chart = build_sxr_chart(series([1e-6] * 11, step=timedelta(minutes=6)), now=NOW)
    labels = chart['time_labels']
    assert labels[0]['label'] == '07:00'
    assert labels[-1]['label'] == '08:00'
    # flare card times use the same zone
    assert format_time('2026-10-19T12:00:00Z') == '2026-10-19 08:00:00 EDT'
