#!/usr/bin/env python3
"""
Test the dashboard callbacks by calling them directly with a fake backend
"""

import dash
import pytest

import app as dashboard_app


@pytest.fixture
def patched_app(monkeypatch, data_manager):
    monkeypatch.setattr(dashboard_app, 'data_manager', data_manager)
    return dashboard_app


def test_layout_built_without_earth_engine():
    assert dashboard_app.index_keys == ['EVI', 'NDVI']
    assert dashboard_app.app.layout is not None


def test_slider_value_from_search(data_manager):
    periods = data_manager.periods

    assert dashboard_app.slider_value_from_search('?date=2018-08-15', periods) == 1
    assert dashboard_app.slider_value_from_search('?date=2001-01-01', periods) == 0
    assert dashboard_app.slider_value_from_search('', periods) is None
    assert dashboard_app.slider_value_from_search('?zoom=3', periods) is None
    assert dashboard_app.slider_value_from_search('?date=soon', periods) is None


def test_initialize_slider(patched_app):
    assert patched_app.initialize_slider('?date=2018-07-02') == 0
    assert patched_app.initialize_slider(None) is dash.no_update


def test_update_map_renders_selected_window(patched_app, data_manager, fake_backend):
    container, window_info = patched_app.update_map(2)

    start, end = data_manager.periods[2]
    assert window_info == f"Median composite: {start} to {end}"
    assert ('tiles', 'EVI', start, end) in fake_backend.calls
    assert ('tiles', 'NDVI', start, end) in fake_backend.calls

    layers_control = container.children[0].children[1]
    assert len(layers_control.children) == 5


def test_update_map_reports_missing_imagery(monkeypatch, make_data_manager):
    monkeypatch.setattr(dashboard_app, 'data_manager', make_data_manager(failing={'EVI', 'NDVI'}))

    _, window_info = dashboard_app.update_map(None)

    assert window_info.endswith("(no imagery could be rendered)")


def test_update_charts(patched_app, fake_backend):
    evi_fig, ndvi_fig, summary, last_update = patched_app.update_charts(None)

    assert len(evi_fig.data) == 3
    assert ndvi_fig.layout.title.text == 'S2 NDVI Recovery after 2018 Holy Fire'
    assert last_update.startswith('Last updated: ')
    assert ('series', 'EVI') in fake_backend.calls

    patched_app.update_charts(1)
    assert fake_backend.calls.count(('series', 'EVI')) == 2


def test_update_charts_with_failed_series(monkeypatch, make_data_manager):
    monkeypatch.setattr(dashboard_app, 'data_manager', make_data_manager(failing={'NDVI'}))

    evi_fig, ndvi_fig, _, _ = dashboard_app.update_charts(None)

    assert len(evi_fig.data) == 3
    assert 'could not be loaded' in ndvi_fig.layout.annotations[0].text


def test_clear_cache(patched_app, data_manager):
    data_manager.get_time_series('EVI')

    assert patched_app.clear_cache(1) == "Cache Cleared"
    assert data_manager.series_cache == {}


def find_component(component, component_id):
    """First component with the given id in a layout tree."""
    if getattr(component, 'id', None) == component_id:
        return component
    children = getattr(component, 'children', None)
    if children is None or isinstance(children, str):
        return None
    if not isinstance(children, (list, tuple)):
        children = [children]
    for child in children:
        found = find_component(child, component_id)
        if found is not None:
            return found
    return None


def test_layout_is_built_per_page_load(patched_app, data_manager, move_today):
    before = find_component(patched_app.serve_layout(), 'date-slider')

    move_today(90)
    after = find_component(patched_app.serve_layout(), 'date-slider')

    assert after.max == before.max + 3
    assert after.max == len(data_manager.periods) - 1


def test_latest_window_tracks_today(patched_app, move_today):
    later = move_today(90)

    _, window_info = patched_app.update_map(None)

    latest_start, latest_end = patched_app.data_manager.periods[-1]
    assert (later - latest_start).days < 30
    assert window_info == f"Median composite: {latest_start} to {latest_end}"
