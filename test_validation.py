#!/usr/bin/env python3
"""
Test configuration validation
"""

import pytest

from recovery_dashboard.core.model import build_data_model
from utils.data.validation import (
    validate_dashboard_config,
    validate_date_range,
    validate_dates_config,
    validate_file_exists,
    validate_hex_color,
    validate_vis_params,
)


def test_default_model_is_valid():
    assert validate_dashboard_config(build_data_model({})) == []


def test_date_range_ordering():
    validate_date_range('2018-07-01', '2019-07-01')
    with pytest.raises(ValueError):
        validate_date_range('2019-07-01', '2018-07-01')
    with pytest.raises(ValueError):
        validate_date_range('not a date', '2018-07-01')


@pytest.mark.parametrize('color, expected', [
    ('ffcc5c', True),
    ('#4040A1', True),
    ('22ff0', False),
    ('green', False),
    (None, False),
])
def test_hex_colors(color, expected):
    assert validate_hex_color(color) is expected


def test_vis_params_problems():
    assert validate_vis_params({'min': 0, 'max': 1, 'palette': ['FFFFFF', '011301']}) == []

    problems = validate_vis_params({'min': 1, 'max': 0, 'palette': []})
    assert any('below max' in problem for problem in problems)
    assert any('palette is empty' in problem for problem in problems)

    assert validate_vis_params({'palette': ['FFFFFF']}) == [
        "Visualization parameters need 'min' and 'max'"
    ]


def test_dashboard_config_problems():
    model = build_data_model({
        'dates': {'start': '2020-01-01', 'end': '2019-01-01', 'period_days': 0},
        'regions': {'burn_scar': {'color': 'orange'}},
    })
    model['regions']['burn_scar']['label'] = ''

    problems = validate_dashboard_config(model)

    assert any('must be before' in problem for problem in problems)
    assert 'period_days must be positive' in problems
    assert "Region 'burn_scar' has no label" in problems
    assert "Region 'burn_scar' has an invalid colour" in problems


def test_file_exists(tmp_path):
    existing = tmp_path / 'regions.geojson'
    existing.write_text('{}')

    assert validate_file_exists(existing)
    assert not validate_file_exists(tmp_path / 'missing.geojson')


def test_dates_config_reports_wrong_types():
    problems = validate_dates_config({
        'start': '2018-07-01', 'end': None, 'period_days': 'monthly',
        'start_year': '2018', 'end_year': 2030,
    })

    assert "period_days must be an integer, got 'monthly'" in problems
    assert any('start_year and end_year must be integers' in problem for problem in problems)


def test_dates_config_checks_open_end_against_today():
    problems = validate_dates_config({
        'start': '2999-01-01', 'end': None, 'period_days': 30,
        'start_year': 2018, 'end_year': 2030,
    })

    assert len(problems) == 1
    assert 'must be before end date' in problems[0]


def test_dates_config_requires_start():
    problems = validate_dates_config({'start': None, 'period_days': 30,
                                      'start_year': 2018, 'end_year': 2030})
    assert problems == ["dates.start is required"]


def test_non_numeric_vis_and_scale_are_reported():
    model = build_data_model({'indices': {'EVI': {'scale': 'thirty', 'vis': {'max': 'high'}}}})

    problems = validate_dashboard_config(model)

    assert "EVI: scale must be positive" in problems
    assert any(problem.startswith('EVI: Visualization min and max must be numbers') for problem in problems)


def test_region_filter_problems():
    model = build_data_model({'regions': {
        'burn_scar': {'filter': ['Incid_Name', 'HOLY']},
        'santiago': {'filter': {'name': 'Santiago'}},
    }})

    problems = validate_dashboard_config(model)

    assert "Region 'burn_scar' filter must be a mapping of property to value" in problems
    assert "Region 'santiago' has a filter but no asset" in problems
