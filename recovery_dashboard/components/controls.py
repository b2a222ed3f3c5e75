#!/usr/bin/env python3
"""
Control Components for the Recovery Dashboard

This module provides the user interface controls: the date slider that
selects the composite window, the introduction text, and the cache and
summary cards.
"""

import dash_bootstrap_components as dbc
from dash import dcc, html
from datetime import date
from typing import List, Dict, Any, Optional, Tuple
import logging

from ..core.periods import format_window
from .styles import STYLES

logger = logging.getLogger(__name__)


class ControlComponents:
    """
    Handles the creation of user interface control components for the dashboard.

    Features:
    - Date slider stepping through fixed-length composite windows
    - Introduction text
    - Cache controls
    - Data summary
    """

    def __init__(self, config: Dict[str, Any]):
        """Initialize control components with configuration."""
        self.config = config
        self.app_config = config.get('app', {})
        self.period_days = config.get('dates', {}).get('period_days', 30)

        logger.info("Control components initialized")

    @staticmethod
    def create_slider_marks(periods: List[Tuple[date, date]]) -> Dict[int, str]:
        """Label the first window and the first window of each new year."""
        marks = {}
        previous_year = None
        for i, (window_start, _) in enumerate(periods):
            if window_start.year != previous_year:
                marks[i] = str(window_start.year)
                previous_year = window_start.year
        return marks

    def create_date_slider(self, periods: List[Tuple[date, date]],
                           value: Optional[int] = None) -> dbc.Card:
        """
        Create the date slider selecting one composite window.

        Args:
            periods: Consecutive (start, end) windows
            value: Initially selected window, defaults to the latest

        Returns:
            Bootstrap Card component with the slider
        """
        last_index = max(len(periods) - 1, 0)
        if value is None:
            value = last_index

        date_slider = dbc.Card([
            dbc.CardBody([
                dcc.Slider(
                    id='date-slider',
                    min=0,
                    max=last_index,
                    step=1,
                    value=value,
                    marks=self.create_slider_marks(periods),
                    included=False,
                    updatemode='mouseup'
                ),
                html.Div(id='window-info', className='text-center small mt-1',
                         children=self.update_window_info(periods[value]) if periods else "")
            ], className='py-2')
        ], className='mb-2')

        return date_slider

    def create_intro_card(self) -> html.Div:
        """Create the introduction text shown under the charts."""
        intro_text = self.app_config.get('intro_text', '')
        return html.Div([
            html.P(intro_text, style=STYLES['intro_text'])
        ], className='mt-3')

    def create_analysis_controls(self) -> dbc.Card:
        """
        Create cache control buttons.

        Returns:
            Bootstrap Card component with analysis controls
        """
        analysis_controls = dbc.Card([
            dbc.CardHeader("Analysis Controls"),
            dbc.CardBody([
                dbc.Row([
                    dbc.Col([
                        dbc.Button(
                            "Reload Time Series",
                            id='reload-series-btn',
                            color='primary',
                            size='sm',
                            style={'width': '100%'}
                        )
                    ], width=6),
                    dbc.Col([
                        dbc.Button(
                            "Clear Cache",
                            id='clear-cache-btn',
                            color='info',
                            size='sm',
                            style={'width': '100%'}
                        )
                    ], width=6)
                ])
            ])
        ], className='mb-3')

        return analysis_controls

    def create_data_summary_card(self) -> dbc.Card:
        """
        Create data summary information card.

        Returns:
            Bootstrap Card component with data summary
        """
        summary_card = dbc.Card([
            dbc.CardHeader("Data Summary"),
            dbc.CardBody([
                html.Div(id='data-summary-content', children=[
                    html.P("Time series not loaded yet", className='text-muted')
                ])
            ])
        ], className='mb-3')

        return summary_card

    def update_window_info(self, window: Tuple[date, date]) -> str:
        """Text describing the selected composite window."""
        return f"Median composite: {format_window(window)}"

    def update_data_summary(self, data_summary: Dict[str, Any]) -> List[html.P]:
        """
        Update the data summary display.

        Args:
            data_summary: Summary from the data manager

        Returns:
            List of HTML components for the summary card
        """
        try:
            if not data_summary:
                return [html.P("No data summary available", className='text-muted')]

            date_range = data_summary.get('date_range', {})
            components = [
                html.P(f"Study period: {date_range.get('start')} to {date_range.get('end')}",
                       className='mb-1'),
                html.P(f"Slider windows: {data_summary.get('period_count', 0)} "
                       f"({self.period_days} days each)", className='mb-1'),
                html.P(f"Regions: {', '.join(data_summary.get('regions', []))}", className='mb-1')
            ]

            for index_key, info in data_summary.get('indices', {}).items():
                first = info['first'].strftime('%Y-%m')
                last = info['last'].strftime('%Y-%m')
                components.append(
                    html.P(f"{index_key}: {info['records']:,} values, {first} to {last}",
                           className='mb-1')
                )

            return components

        except Exception as e:
            logger.error(f"Error updating data summary: {e}")
            return [html.P("Error loading summary", className='text-danger')]
