#!/usr/bin/env python3
"""
Data Manager for the Recovery Dashboard

This module provides the interface between the dashboard and Earth Engine,
handling configuration loading, the data model, request caching, and the
containment of remote evaluation errors.
"""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Any

import pandas as pd
import yaml

from .model import build_data_model, displayed_indices
from .periods import build_periods, format_window, resolve_date_range
from utils.data.validation import (
    validate_dashboard_config,
    validate_dates_config,
    validate_file_exists,
)

logger = logging.getLogger(__name__)

project_root = Path(__file__).parent.parent.parent


class DashboardDataManager:
    """
    Manages data access and caching for the recovery dashboard.

    The Earth Engine backend is created on first use so that the layout can
    be built without contacting the service. Any object with the same
    methods can be passed in as the backend.
    """

    def __init__(self, config_path: str = "config/dashboard_config.yaml", backend=None):
        """Initialize the data manager with configuration."""
        self.config_path = self._resolve_path(config_path)
        self.config = self._load_config(self.config_path)
        self.data_model = build_data_model(self.config)
        self._attach_region_geometries()

        date_problems = validate_dates_config(self.data_model['dates'])
        if date_problems:
            raise ValueError(f"Invalid 'dates' configuration in {self.config_path}: "
                             f"{'; '.join(date_problems)}")

        for problem in validate_dashboard_config(self.data_model):
            logger.warning(f"Configuration problem: {problem}")

        self._backend = backend
        self.series_cache = {}
        self.tile_cache = {}
        self.geojson_cache = None

        self.end_date = None
        self.periods = []
        self.refresh_periods()

        logger.info(f"Dashboard Data Manager initialized with {len(self.periods)} periods")

    @staticmethod
    def _resolve_path(path: str) -> Path:
        path = Path(path)
        if not path.is_absolute() and not path.exists():
            path = project_root / path
        return path

    def _load_config(self, config_path: Path) -> Dict[str, Any]:
        """Load dashboard configuration."""
        try:
            with open(config_path, 'r') as file:
                return yaml.safe_load(file) or {}
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")
            return {}

    def _attach_region_geometries(self):
        """Copy geometries from the regions GeoJSON file onto regions without an asset."""
        regions_file = self.config.get('regions_file')
        if not regions_file:
            return

        regions_path = self._resolve_path(regions_file)
        if not validate_file_exists(regions_path):
            return

        try:
            with open(regions_path, 'r', encoding='utf-8') as fh:
                geojson = json.load(fh)
        except Exception as e:
            logger.error(f"Error reading regions file {regions_path}: {e}")
            return

        regions = self.data_model['regions']
        for feature in geojson.get('features', []):
            properties = feature.get('properties', {})
            region_id = properties.get('id')
            if region_id not in regions or regions[region_id].get('asset'):
                continue

            region = regions[region_id]
            region['geometry'] = feature.get('geometry')
            region['approximate'] = properties.get('approximate', True)
            if region['approximate']:
                logger.warning(f"Region '{region_id}' uses an approximate outline from "
                               f"{regions_path.name}; configure an asset for exact boundaries")

    def refresh_periods(self) -> bool:
        """
        Rebuild the slider windows when the study end date has moved.

        With no configured end the study runs to today, so a long-running
        server gains a window every period. Cached series and tiles are
        dropped when the end moves.

        Returns:
            True if the windows were rebuilt
        """
        dates = self.data_model['dates']
        _, end_date = resolve_date_range(dates['start'], dates.get('end'))
        if end_date == self.end_date:
            return False

        self.periods = build_periods(dates['start'], end_date, dates.get('period_days', 30))

        if self.end_date is not None:
            logger.info(f"Study end moved from {self.end_date} to {end_date}, clearing cached data")
            self.series_cache.clear()
            self.tile_cache.clear()
            if self._backend is not None:
                self._backend.set_end_date(end_date)

        self.end_date = end_date
        return True

    @property
    def backend(self):
        """Earth Engine backend, initializing Earth Engine on first access."""
        if self._backend is None:
            from .earth_engine import EarthEngineBackend, ee_initialize

            ee_config = self.config.get('earth_engine', {})
            ee_initialize(ee_config)
            self._backend = EarthEngineBackend(self.data_model, ee_config)
        return self._backend

    @property
    def regions(self) -> Dict[str, Dict[str, Any]]:
        return self.data_model['regions']

    @property
    def indices(self) -> Dict[str, Dict[str, Any]]:
        return self.data_model['indices']

    def get_displayed_indices(self) -> List[str]:
        """Indices rendered as charts and layers."""
        return displayed_indices(self.data_model)

    def get_time_series(self, index_key: str, force_reload: bool = False) -> Optional[pd.DataFrame]:
        """
        Get the monthly per-region series of an index.

        Args:
            index_key: Index identifier ('ET', 'EVI' or 'NDVI')
            force_reload: Re-request the series even if cached

        Returns:
            DataFrame with 'date', 'label' and 'value' columns, None on failure
        """
        self.refresh_periods()
        if not force_reload and index_key in self.series_cache:
            logger.info(f"Using cached series for {index_key}")
            return self.series_cache[index_key]

        try:
            series = self.backend.region_series(index_key)
            self.series_cache[index_key] = series
            logger.info(f"Loaded {index_key} series: {len(series)} records")
            return series
        except Exception as e:
            logger.error(f"Error loading {index_key} series: {e}")
            return None

    def get_window(self, period_index: Optional[int]) -> Tuple[date, date]:
        """Date window for a slider position, defaulting to the latest period."""
        self.refresh_periods()
        if period_index is None:
            period_index = len(self.periods) - 1
        period_index = max(0, min(int(period_index), len(self.periods) - 1))
        return self.periods[period_index]

    def get_layer_tiles(self, start: date, end: date) -> Dict[str, str]:
        """
        Get composite tile URLs for the displayed indices over [start, end).

        Indices whose composite cannot be rendered are logged and left out.
        """
        tiles = {}
        for index_key in self.get_displayed_indices():
            cache_key = (index_key, start, end)
            if cache_key in self.tile_cache:
                tiles[index_key] = self.tile_cache[cache_key]
                continue

            try:
                url = self.backend.composite_tile_url(index_key, start, end)
                self.tile_cache[cache_key] = url
                tiles[index_key] = url
            except Exception as e:
                logger.error(f"Error rendering {index_key} composite for "
                             f"{format_window((start, end))}: {e}")

        return tiles

    def get_region_geojson(self) -> Optional[Dict[str, Any]]:
        """Region outlines as GeoJSON, None on failure."""
        if self.geojson_cache is not None:
            return self.geojson_cache

        try:
            self.geojson_cache = self.backend.region_geojson()
            return self.geojson_cache
        except Exception as e:
            logger.error(f"Error loading region outlines: {e}")
            return None

    def get_data_summary(self) -> Dict[str, Any]:
        """Get summary information about the loaded series."""
        summary = {
            'date_range': {
                'start': self.periods[0][0],
                'end': self.periods[-1][1]
            },
            'period_count': len(self.periods),
            'regions': [region['label'] for region in self.regions.values()],
            'indices': {}
        }

        for index_key, series in self.series_cache.items():
            if series is None or series.empty:
                continue
            summary['indices'][index_key] = {
                'records': len(series),
                'first': series['date'].min(),
                'last': series['date'].max()
            }

        return summary

    def clear_cache(self):
        """Clear all cached data."""
        self.series_cache.clear()
        self.tile_cache.clear()
        self.geojson_cache = None
        logger.info(f"Cache cleared at {datetime.now().strftime('%H:%M:%S')}")
