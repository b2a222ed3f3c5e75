#!/usr/bin/env python3
"""
Interactive Map Component for the Recovery Dashboard

This module provides the map using dash-leaflet: Earth Engine composite tile
layers for each displayed index, the region outlines, and the colour legend.
"""

import dash_leaflet as dl
from dash import html
from typing import List, Dict, Any, Optional
import logging

from ..core.model import find_key, get_property_value_list
from .styles import STYLES, with_style

logger = logging.getLogger(__name__)

EE_ATTRIBUTION = 'Map Data &copy; <a href="https://earthengine.google.com/">Google Earth Engine</a>'


class MapComponent:
    """
    Handles the map display for the recovery dashboard.

    Features:
    - Median composite layers per index for the selected window
    - Region outlines coloured like their chart series
    - Gradient legend with region colour rows
    - Layer control to toggle every overlay
    """

    def __init__(self, config: Dict[str, Any], data_model: Dict[str, Any]):
        """Initialize the map component with configuration and the data model."""
        self.config = config
        self.map_config = config.get('visualization', {}).get('map', {})
        self.legend_config = config.get('visualization', {}).get('legend', {})
        self.regions = data_model['regions']
        self.indices = data_model['indices']

        # Default map settings
        self.center = [self.map_config.get('center_lat', 33.7266),
                       self.map_config.get('center_lon', -117.5341)]
        self.default_zoom = self.map_config.get('default_zoom', 11)
        self.height = self.map_config.get('height', '700px')
        self.region_opacity = self.map_config.get('region_opacity', 0.5)

        logger.info("Map component initialized")

    def create_index_layers(self, tiles: Dict[str, str]) -> List[dl.Overlay]:
        """
        Create one overlay per index composite.

        Args:
            tiles: Tile URL per index key, in display order

        Returns:
            List of dash_leaflet Overlay components
        """
        layers = []
        for index_key, url in tiles.items():
            index = self.indices.get(index_key, {})
            layers.append(dl.Overlay(
                dl.TileLayer(url=url, attribution=EE_ATTRIBUTION),
                name=index.get('label', index_key),
                checked=True
            ))
        return layers

    def create_region_layers(self, geojson: Optional[Dict[str, Any]]) -> List[dl.Overlay]:
        """Create one outline overlay per region."""
        if not geojson:
            return []

        layers = []
        for feature in geojson.get('features', []):
            properties = feature.get('properties', {})
            region_key = properties.get('id') or find_key(self.regions, 'label', properties.get('label'))
            region = self.regions.get(region_key)
            if region is None:
                logger.warning(f"Outline without a matching region: {properties}")
                continue

            color = '#' + region['color']
            layers.append(dl.Overlay(
                dl.GeoJSON(
                    data={'type': 'FeatureCollection', 'features': [feature]},
                    id=f"region-{region_key}",
                    style={
                        'color': color,
                        'weight': 2,
                        'opacity': self.region_opacity,
                        'fillColor': color,
                        'fillOpacity': self.region_opacity * 0.66
                    }
                ),
                name=self._display_name(region, region.get('layer_name', region['label'])),
                checked=True
            ))
        return layers

    def create_legend(self) -> html.Div:
        """
        Create the legend: title, max value, colour gradient, min value,
        then one colour row per region.
        """
        index_key = self.legend_config.get('index', 'EVI')
        vis = self.indices.get(index_key, {}).get('vis', {})
        palette = ['#' + color for color in vis.get('palette', [])]

        gradient = with_style(
            'legend_gradient',
            background=f"linear-gradient(to top, {', '.join(palette)})"
        )

        names = [self._display_name(region, region.get('legend_name'))
                 for region in self.regions.values()]
        colors = get_property_value_list(self.regions, 'color')
        rows = [self._create_legend_row(color, name) for color, name in zip(colors, names)]

        return html.Div([
            html.Div(self.legend_config.get('title', 'Average EVI/NDVI'),
                     style=STYLES['legend_title']),
            html.P(str(vis.get('max', '')), style=STYLES['legend_label']),
            html.Div(style=gradient),
            html.P(str(vis.get('min', '')), style=STYLES['legend_label']),
            html.Div(rows, className='mt-2')
        ], id='map-legend', style=STYLES['legend_panel'])

    @staticmethod
    def _display_name(region: Dict[str, Any], name: str) -> str:
        """Region name, flagged when its outline is only approximate."""
        if region.get('approximate'):
            return f"{name} (approximate outline)"
        return name

    def _create_legend_row(self, color: str, name: str) -> html.Div:
        """Create one legend row: a coloured box and its description."""
        color_box = html.Span(style=with_style('legend_color_box', backgroundColor='#' + color))
        description = html.Span(name, style=STYLES['legend_description'])
        return html.Div([color_box, description])

    def create_map(self, tiles: Dict[str, str], geojson: Optional[Dict[str, Any]]) -> html.Div:
        """
        Create the complete map for one composite window.

        Args:
            tiles: Tile URL per index key
            geojson: Region outlines

        Returns:
            HTML Div with the map and its legend
        """
        overlays = self.create_index_layers(tiles) + self.create_region_layers(geojson)

        complete_map = dl.Map(
            id="recovery-map",
            style={'width': '100%', 'height': self.height},
            center=self.center,
            zoom=self.default_zoom,
            children=[
                dl.TileLayer(),
                dl.LayersControl(overlays, collapsed=False)
            ]
        )

        return html.Div([complete_map, self.create_legend()], style={'position': 'relative'})
