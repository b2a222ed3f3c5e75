#!/usr/bin/env python3
"""
Main Layout Component for the Recovery Dashboard

This module composes the dashboard: a side panel holding the time-series
charts and introduction text, and a map area with the date slider above the
map.
"""

import dash_bootstrap_components as dbc
from dash import html, dcc
from typing import Dict, Any, List
import logging

from .controls import ControlComponents
from .styles import STYLES

logger = logging.getLogger(__name__)


class DashboardLayout:
    """
    Handles the creation of the main dashboard layout.

    Features:
    - Fixed-width side panel with one chart per displayed index
    - Map area with the date slider and composite map
    - URL location for initializing the selected window
    """

    def __init__(self, config: Dict[str, Any]):
        """Initialize layout with configuration."""
        self.config = config
        self.app_config = config.get('app', {})
        self.controls = ControlComponents(config)

        logger.info("Dashboard layout initialized")

    def create_main_layout(self, periods: List, index_keys: List[str]) -> html.Div:
        """
        Create the main dashboard layout.

        Args:
            periods: Slider windows
            index_keys: Indices charted in the side panel

        Returns:
            HTML Div containing the complete layout
        """
        layout = html.Div([
            dcc.Location(id='url', refresh=False),

            html.Div([
                self.create_side_panel(index_keys)
            ], style=STYLES['side_panel']),

            html.Div([
                self.controls.create_date_slider(periods),
                self.create_map_panel()
            ], style=STYLES['map_area'])

        ], style={'display': 'flex', 'flexDirection': 'row'})

        return layout

    def create_side_panel(self, index_keys: List[str]) -> html.Div:
        """
        Create the side panel: title, charts, introduction, controls.

        Returns:
            HTML Div containing the side panel
        """
        return html.Div([
            self.create_header(),
            html.Div([self.create_plot_panel(f"timeseries-{key}") for key in index_keys]),
            self.controls.create_intro_card(),
            self.controls.create_analysis_controls(),
            self.controls.create_data_summary_card()
        ])

    def create_header(self) -> html.Div:
        """
        Create the header with title and status indicators.

        Returns:
            HTML Div containing header elements
        """
        header = html.Div([
            html.H4(
                self.app_config.get('title', 'Holy Fire Vegetation Recovery'),
                className='text-primary mb-1'
            ),
            html.Div([
                dbc.Badge("Ready", color="success", id="status-badge", className="me-2"),
                html.Span(id="last-update", className="text-muted small")
            ])
        ], className='border-bottom pb-2 mb-3')

        return header

    def create_map_panel(self) -> html.Div:
        """
        Create the map container; the map is populated by callbacks.

        Returns:
            HTML Div holding the map
        """
        return dcc.Loading(
            id="loading-map",
            children=[
                html.Div(id="map-container", children=[
                    html.P("Map will be loaded after a window is selected",
                           className="text-center text-muted mt-5 pt-5")
                ])
            ],
            type="default"
        )

    def create_plot_panel(self, plot_id: str) -> html.Div:
        """
        Create a panel for displaying one chart.

        Args:
            plot_id: Unique identifier for the plot

        Returns:
            HTML Div containing the plot area
        """
        return html.Div([
            dcc.Loading(
                id=f"loading-{plot_id}",
                children=[
                    dcc.Graph(
                        id=plot_id,
                        figure={},
                        config={
                            'displayModeBar': True,
                            'displaylogo': False,
                            'modeBarButtonsToRemove': ['pan2d', 'lasso2d']
                        }
                    )
                ],
                type="default"
            )
        ], className='mb-2')
