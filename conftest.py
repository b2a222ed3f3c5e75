"""
Shared test fixtures.

A fake backend stands in for Earth Engine so that the data manager,
components and callbacks can be tested without credentials or network.
"""

import json
from datetime import date, timedelta
from pathlib import Path

import pandas as pd
import pytest

from recovery_dashboard.core import periods
from recovery_dashboard.core.data_manager import DashboardDataManager

project_root = Path(__file__).parent
CONFIG_PATH = project_root / "config" / "dashboard_config.yaml"
REGIONS_PATH = project_root / "config" / "regions.geojson"


class FakeBackend:
    """Records requests and returns canned results."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    def region_series(self, key):
        self.calls.append(('series', key))
        if key in self.failing:
            raise RuntimeError(f"{key} evaluation failed")
        return pd.DataFrame({
            'date': pd.to_datetime(['2019-01-01', '2019-01-01', '2019-01-01',
                                    '2019-02-01', '2019-02-01', '2019-02-01']),
            'label': ['2018 Holy Fire burn scar', 'Santiago', 'Coldwater'] * 2,
            'value': [0.12, 0.35, 0.41, 0.15, 0.37, 0.43]
        })

    def composite_tile_url(self, key, start, end):
        self.calls.append(('tiles', key, start, end))
        if key in self.failing:
            raise RuntimeError(f"{key} composite failed")
        return f"https://tiles.test/{key}/{start.isoformat()}/{{z}}/{{x}}/{{y}}"

    def set_end_date(self, end_date):
        self.calls.append(('end_date', end_date))

    def region_geojson(self):
        self.calls.append(('geojson',))
        with open(REGIONS_PATH, 'r', encoding='utf-8') as fh:
            return json.load(fh)


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def data_manager(fake_backend):
    return DashboardDataManager(config_path=str(CONFIG_PATH), backend=fake_backend)


@pytest.fixture
def config(data_manager):
    return data_manager.config


@pytest.fixture
def make_data_manager():
    """Factory for data managers with their own backend or config."""
    def make(failing=(), config_path=CONFIG_PATH):
        backend = FakeBackend(failing=failing)
        return DashboardDataManager(config_path=str(config_path), backend=backend)
    return make


@pytest.fixture
def move_today(monkeypatch):
    """Shift the date that an open-ended study range resolves as today."""
    def move(days):
        later = date.today() + timedelta(days=days)

        class MovedDate(date):
            @classmethod
            def today(cls):
                return later

        monkeypatch.setattr(periods, 'date', MovedDate)
        return later
    return move
