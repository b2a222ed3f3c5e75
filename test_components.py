#!/usr/bin/env python3
"""
Test Dashboard Components

Build the controls, charts, map and layout from the shipped configuration
without running the Dash server.
"""

import pandas as pd
import pytest

from recovery_dashboard.components.controls import ControlComponents
from recovery_dashboard.components.layout import DashboardLayout
from recovery_dashboard.components.map_component import MapComponent
from recovery_dashboard.components.plots import PlotComponents
from recovery_dashboard.core.periods import build_periods


def collect_ids(component):
    """All component ids in a layout tree."""
    ids = []
    component_id = getattr(component, 'id', None)
    if component_id is not None:
        ids.append(component_id)

    children = getattr(component, 'children', None)
    if children is None or isinstance(children, str):
        return ids
    if not isinstance(children, (list, tuple)):
        children = [children]
    for child in children:
        ids.extend(collect_ids(child))
    return ids


@pytest.fixture
def plots(data_manager):
    return PlotComponents(data_manager.config, data_manager.regions)


@pytest.fixture
def map_component(data_manager):
    return MapComponent(data_manager.config, data_manager.data_model)


# Plots

def test_time_series_plot_one_trace_per_region(plots, data_manager, fake_backend):
    series = fake_backend.region_series('NDVI')

    fig = plots.create_time_series_plot(series, data_manager.indices['NDVI'])

    assert [trace.name for trace in fig.data] == ['2018 Holy Fire burn scar', 'Santiago', 'Coldwater']
    assert [trace.line.color for trace in fig.data] == ['#ffcc5c', '#22ff00', '#4040a1']
    assert fig.data[0].mode == 'lines+markers'
    assert fig.data[0].line.width == 1
    assert fig.data[0].marker.size == 4
    assert fig.layout.title.text == 'S2 NDVI Recovery after 2018 Holy Fire'
    assert fig.layout.yaxis.title.text == 'NDVI'


def test_time_series_plot_keeps_unknown_labels_last(plots, data_manager):
    series = pd.DataFrame({
        'date': pd.to_datetime(['2019-01-01', '2019-01-01']),
        'label': ['Trabuco', 'Santiago'],
        'value': [0.2, 0.3],
    })

    fig = plots.create_time_series_plot(series, data_manager.indices['EVI'])

    assert [trace.name for trace in fig.data] == ['Santiago', 'Trabuco']
    assert fig.data[1].line.color is None


@pytest.mark.parametrize('data, message', [
    (None, 'could not be loaded'),
    (pd.DataFrame(columns=['date', 'label', 'value']), 'no observations'),
    (pd.DataFrame({'date': [pd.Timestamp('2019-01-01')]}), 'missing columns'),
])
def test_time_series_plot_placeholders(plots, data_manager, data, message):
    fig = plots.create_time_series_plot(data, data_manager.indices['EVI'])

    assert len(fig.data) == 0
    assert message in fig.layout.annotations[0].text


# Map

def test_index_and_region_layers(map_component, fake_backend):
    tiles = {'EVI': 'https://tiles.test/EVI/{z}/{x}/{y}', 'NDVI': 'https://tiles.test/NDVI/{z}/{x}/{y}'}

    container = map_component.create_map(tiles, fake_backend.region_geojson())
    leaflet_map, legend = container.children
    layers_control = leaflet_map.children[1]

    assert leaflet_map.center == [33.7266, -117.5341]
    assert leaflet_map.zoom == 11
    assert [layer.name for layer in layers_control.children] == [
        'EVI', 'NDVI',
        '2018 Holy Fire (approximate outline)',
        'Santiago (approximate outline)',
        'Coldwater (approximate outline)',
    ]
    assert layers_control.children[0].children.url == tiles['EVI']

    fire_outline = layers_control.children[2].children
    assert fire_outline.style['color'] == '#ffcc5c'
    assert fire_outline.style['opacity'] == 0.5
    assert legend.id == 'map-legend'


def test_map_without_outlines(map_component):
    container = map_component.create_map({}, None)
    layers_control = container.children[0].children[1]

    assert layers_control.children == []


def test_legend_content(map_component):
    legend = map_component.create_legend()
    title, max_label, gradient, min_label, rows = legend.children

    assert title.children == 'Average EVI/NDVI'
    assert max_label.children == '1'
    assert min_label.children == '0'
    assert gradient.style['background'].startswith('linear-gradient(to top, #FFFFFF')
    assert [row.children[1].children for row in rows.children] == [
        '2018 Holy Fire Perimeter (approximate outline)',
        'Santiago (approximate outline)',
        'Coldwater (approximate outline)',
    ]
    assert rows.children[0].children[0].style['backgroundColor'] == '#ffcc5c'


def test_exact_outlines_keep_plain_names(data_manager):
    for region in data_manager.regions.values():
        region['approximate'] = False
    component = MapComponent(data_manager.config, data_manager.data_model)

    rows = component.create_legend().children[-1]

    assert [row.children[1].children for row in rows.children] == [
        '2018 Holy Fire Perimeter', 'Santiago', 'Coldwater'
    ]


# Controls

def test_slider_marks_label_each_year():
    periods = build_periods('2018-07-01', '2019-03-01', 30)

    assert ControlComponents.create_slider_marks(periods) == {0: '2018', 7: '2019'}


def test_date_slider_defaults_to_latest_window(config):
    periods = build_periods('2018-07-01', '2019-03-01', 30)

    card = ControlComponents(config).create_date_slider(periods)
    slider, info = card.children[0].children

    assert slider.id == 'date-slider'
    assert slider.max == len(periods) - 1
    assert slider.value == len(periods) - 1
    assert info.children == f"Median composite: {periods[-1][0]} to {periods[-1][1]}"


def test_data_summary_display(config, data_manager):
    data_manager.get_time_series('NDVI')
    controls = ControlComponents(config)

    lines = [p.children for p in controls.update_data_summary(data_manager.get_data_summary())]

    assert lines[0].startswith('Study period: 2018-07-01')
    assert 'Regions: 2018 Holy Fire burn scar, Santiago, Coldwater' in lines
    assert lines[-1] == 'NDVI: 6 values, 2019-01 to 2019-02'


def test_empty_data_summary(config):
    lines = ControlComponents(config).update_data_summary({})
    assert lines[0].children == 'No data summary available'


# Layout

def test_main_layout_ids(config, data_manager):
    layout = DashboardLayout(config).create_main_layout(data_manager.periods, ['EVI', 'NDVI'])
    ids = collect_ids(layout)

    for expected in ['url', 'date-slider', 'window-info', 'map-container',
                     'timeseries-EVI', 'timeseries-NDVI', 'reload-series-btn',
                     'clear-cache-btn', 'status-badge', 'last-update', 'data-summary-content']:
        assert expected in ids
    assert 'timeseries-ET' not in ids
