#!/usr/bin/env python3
"""
Earth Engine Interface for the Recovery Dashboard

This module builds the server-side image collections (ECOSTRESS ET, Landsat
EVI, Sentinel-2 NDVI), aggregates them into monthly median composites, reduces
them over the study regions, and renders composites as map tiles.

Everything here is a request to Earth Engine; the only client-side work is
shaping the returned tables into pandas DataFrames.
"""

import json
import os
import logging
from datetime import date
from typing import Dict, Any, List, Optional, Tuple

import ee
from ee import oauth
from google.oauth2 import service_account
import numpy as np
import pandas as pd

from .periods import month_sequence, resolve_date_range

logger = logging.getLogger(__name__)

# ET (mm/day) = ET (W/m2) * 86400 (s/day) * 1000 (mm/m) / (2.45E6 (J/kg) * 997 (kg/m3))
SECONDS_PER_DAY = 86400
MM_PER_M = 1000
LATENT_HEAT_OF_VAPORIZATION = 2.45e6
WATER_DENSITY = 997
ET_WM2_TO_MM_DAY = SECONDS_PER_DAY * MM_PER_M / (LATENT_HEAT_OF_VAPORIZATION * WATER_DENSITY)

DEFAULT_COLLECTIONS = {
    'ET': 'users/bwilder95/ECOSTRESS_ET',
    'EVI': 'LANDSAT/COMPOSITES/C02/T1_L2_8DAY_EVI',
    'NDVI': 'COPERNICUS/S2_SR_HARMONIZED'
}

_EE_READY = False


def ee_initialize(ee_config: Optional[Dict[str, Any]] = None) -> None:
    """Initialize Earth Engine once per process."""
    global _EE_READY
    if _EE_READY:
        return

    ee_config = ee_config or {}
    json_key = os.getenv("EE_SERVICE_ACCOUNT_JSON")
    json_file = os.getenv("EE_SERVICE_ACCOUNT_FILE")
    ee_project = os.getenv("EE_PROJECT") or ee_config.get('project')

    credentials = None
    if json_key:
        service_account_info = json.loads(json_key)
    elif json_file:
        with open(json_file, "r", encoding="utf-8") as fh:
            service_account_info = json.load(fh)
    else:
        service_account_info = None

    if service_account_info is not None:
        if "client_email" not in service_account_info:
            raise ValueError("Service account email address missing in json key")
        credentials = service_account.Credentials.from_service_account_info(
            service_account_info,
            scopes=oauth.SCOPES,
        )

    if credentials is not None and ee_project:
        ee.Initialize(credentials, project=ee_project)
    elif credentials is not None:
        ee.Initialize(credentials)
    elif ee_project:
        ee.Initialize(project=ee_project)
    else:
        ee.Initialize()

    _EE_READY = True
    logger.info(f"Earth Engine initialized (project: {ee_project or 'default'})")


def mask_negative(image):
    """Mask out negative ET retrievals."""
    return image.updateMask(image.gte(0))


def to_mm_per_day(image):
    """Convert a latent heat flux image (W/m2) to ET in mm/day."""
    return image.select([]).addBands(image.multiply(ET_WM2_TO_MM_DAY).rename('ET'))


def features_to_frame(features: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Convert reduced region features to a tidy DataFrame.

    Args:
        features: GeoJSON-like features with 'time', 'label' and 'value' properties

    Returns:
        DataFrame with 'date', 'label' and 'value' columns sorted by date
    """
    records = []
    for feature in features:
        props = feature.get('properties', {})
        if props.get('time') is None:
            continue
        value = props.get('value')
        records.append({
            'date': pd.to_datetime(props['time'], unit='ms'),
            'label': props.get('label'),
            'value': float(value) if value is not None else np.nan
        })

    frame = pd.DataFrame(records, columns=['date', 'label', 'value'])
    frame = frame.dropna(subset=['value'])
    return frame.sort_values(['date', 'label']).reset_index(drop=True)


class EarthEngineBackend:
    """
    Builds and evaluates Earth Engine requests for the dashboard.

    Collections are server-side descriptions, built lazily and memoized per
    index. Only region_series, composite_tile_url and region_geojson contact
    the service.
    """

    def __init__(self, data_model: Dict[str, Any], ee_config: Optional[Dict[str, Any]] = None):
        self.data_model = data_model
        self.ee_config = ee_config or {}
        self.collection_ids = dict(DEFAULT_COLLECTIONS)
        self.collection_ids.update(self.ee_config.get('collections', {}))
        self.max_cloud = self.ee_config.get('max_cloud', 20)

        dates = data_model.get('dates', {})
        self.start_date, self.end_date = resolve_date_range(dates.get('start'), dates.get('end'))
        self.start_year = dates.get('start_year', self.start_date.year)
        self.end_year = dates.get('end_year', self.end_date.year)

        self._collections = {}
        self._regions = None

        logger.info("Earth Engine backend initialized")

    def set_end_date(self, end_date: date) -> None:
        """Move the end of the study range, dropping collections built for the old one."""
        if end_date <= self.start_date:
            raise ValueError(f"End date {end_date} must be after start date {self.start_date}")

        self.end_date = end_date
        self.end_year = self.data_model.get('dates', {}).get('end_year') or end_date.year
        self._collections = {}
        logger.info(f"Earth Engine study range now ends {end_date}")

    def _region_geometry(self, region: Dict[str, Any]):
        if region.get('asset'):
            features = ee.FeatureCollection(region['asset'])
            for property_name, value in (region.get('filter') or {}).items():
                features = features.filter(ee.Filter.eq(property_name, value))
            return features.geometry()
        if region.get('geometry'):
            return ee.Geometry(region['geometry'])
        raise ValueError(f"Region '{region.get('label')}' has neither an asset nor a geometry")

    def regions(self):
        """Feature collection of the study regions labelled for charting."""
        if self._regions is None:
            features = [
                ee.Feature(self._region_geometry(region), {'label': region['label']})
                for region in self.data_model['regions'].values()
            ]
            self._regions = ee.FeatureCollection(features)
        return self._regions

    def site(self):
        """Union of the region geometries."""
        return self.regions().geometry()

    def _date_range(self) -> Tuple[str, str]:
        return self.start_date.isoformat(), self.end_date.isoformat()

    def _build_collection(self, key: str):
        start, end = self._date_range()
        site = self.site()

        if key == 'ET':
            return (ee.ImageCollection(self.collection_ids['ET'])
                    .filterDate(start, end)
                    .map(mask_negative)
                    .map(to_mm_per_day))

        if key == 'EVI':
            return (ee.ImageCollection(self.collection_ids['EVI'])
                    .filterDate(start, end)
                    .select('EVI')
                    .map(lambda image: image.clip(site)))

        if key == 'NDVI':
            def add_ndvi(image):
                ndvi = image.normalizedDifference(['B8', 'B4']).rename('NDVI')
                return image.select([]).addBands(ndvi)

            return (ee.ImageCollection(self.collection_ids['NDVI'])
                    .filterBounds(site)
                    .filterDate(start, end)
                    .filter(ee.Filter.lt('CLOUDY_PIXEL_PERCENTAGE', self.max_cloud))
                    .map(add_ndvi)
                    .select('NDVI')
                    .map(lambda image: image.clip(site)))

        raise KeyError(f"Unknown index: {key}")

    def index_collection(self, key: str):
        """Image collection for one index, filtered to the study range."""
        if key not in self._collections:
            self._collections[key] = self._build_collection(key)
        return self._collections[key]

    def monthly_composites(self, key: str):
        """
        Median composite per calendar month.

        Each image carries 'year', 'month' and 'system:time_start' (first day
        of the month). Months without input imagery are dropped.
        """
        collection = self.index_collection(key)

        def composite(year, month):
            monthly = (collection
                       .filter(ee.Filter.calendarRange(year, year, 'year'))
                       .filter(ee.Filter.calendarRange(month, month, 'month')))
            return (monthly.median()
                    .set('year', year)
                    .set('month', month)
                    .set('image_count', monthly.size())
                    .set('system:time_start', ee.Date.fromYMD(year, month, 1).millis()))

        months = month_sequence(self.start_year, self.end_year, until=self.end_date)
        images = [composite(year, month) for year, month in months]
        return ee.ImageCollection.fromImages(images).filter(ee.Filter.gt('image_count', 0))

    def region_series(self, key: str) -> pd.DataFrame:
        """
        Median index value per region for every monthly composite.

        Returns:
            DataFrame with 'date', 'label' and 'value' columns
        """
        index = self.data_model['indices'][key]
        band = index.get('band', key)
        scale = index.get('scale', 30)
        regions = self.regions()

        def reduce_image(image):
            stats = image.select(band).reduceRegions(
                collection=regions,
                reducer=ee.Reducer.median(),
                scale=scale
            )
            return stats.map(lambda feature: ee.Feature(None, {
                'time': image.get('system:time_start'),
                'label': feature.get('label'),
                'value': feature.get('median')
            }))

        reduced = (ee.FeatureCollection(self.monthly_composites(key).map(reduce_image))
                   .flatten()
                   .filter(ee.Filter.notNull(['value'])))

        logger.info(f"Requesting {key} region series at {scale} m")
        result = reduced.getInfo()
        return features_to_frame(result.get('features', []))

    def composite_tile_url(self, key: str, start: date, end: date) -> str:
        """Tile URL of the median composite for [start, end)."""
        vis = dict(self.data_model['indices'][key].get('vis', {}))
        image = self.index_collection(key).filterDate(
            start.isoformat(), end.isoformat()
        ).median()

        map_id_dict = ee.Image(image).getMapId(vis)
        return map_id_dict['tile_fetcher'].url_format

    def region_geojson(self) -> Dict[str, Any]:
        """GeoJSON FeatureCollection of the region outlines."""
        features = []
        for region_id, region in self.data_model['regions'].items():
            geometry = region.get('geometry')
            if geometry is None:
                geometry = self._region_geometry(region).getInfo()
            features.append({
                'type': 'Feature',
                'geometry': geometry,
                'properties': {'id': region_id, 'label': region['label']}
            })
        return {'type': 'FeatureCollection', 'features': features}
