#!/usr/bin/env python3
"""
Interactive Plot Components for the Recovery Dashboard

This module provides the per-region time-series charts of the monthly
index composites using Plotly.
"""

import plotly.graph_objects as go
import pandas as pd
from typing import Dict, Any, Optional
import logging

from ..core.model import find_key, get_property_value_list

logger = logging.getLogger(__name__)


class PlotComponents:
    """
    Handles the creation of interactive plot components for the dashboard.

    Features:
    - Monthly median time series, one series per region
    - Region colours shared with the map outlines and legend
    - Placeholder figures carrying status or error messages
    """

    def __init__(self, config: Dict[str, Any], regions: Dict[str, Dict[str, Any]]):
        """Initialize plot components with configuration and the region model."""
        self.config = config
        self.plot_config = config.get('visualization', {}).get('plots', {})
        self.regions = regions

        self.line_width = self.plot_config.get('line_width', 1)
        self.marker_size = self.plot_config.get('marker_size', 4)
        self.height = self.plot_config.get('height', 350)

        logger.info("Plot components initialized")

    def series_color(self, label: str) -> Optional[str]:
        """Chart colour of the region whose label is given."""
        region_key = find_key(self.regions, 'label', label)
        if region_key is None:
            return None
        return '#' + self.regions[region_key]['color']

    def create_time_series_plot(self, data: Optional[pd.DataFrame],
                                index: Dict[str, Any]) -> go.Figure:
        """
        Create the time series chart of one index.

        Args:
            data: DataFrame with 'date', 'label' and 'value' columns
            index: Index entry of the data model (title, axis title)

        Returns:
            Plotly Figure object
        """
        title = index.get('title', index.get('label', ''))
        try:
            if data is None:
                return self._create_empty_plot(f"{title}: data could not be loaded")

            if data.empty:
                return self._create_empty_plot(f"{title}: no observations available")

            missing = {'date', 'label', 'value'} - set(data.columns)
            if missing:
                return self._create_empty_plot(f"{title}: missing columns {sorted(missing)}")

            fig = go.Figure()

            # Regions first, in model order, then any label not in the model
            labels = [label for label in get_property_value_list(self.regions, 'label')
                      if label in set(data['label'])]
            labels += [label for label in data['label'].unique() if label not in labels]

            for label in labels:
                series = data[data['label'] == label].sort_values('date')
                fig.add_trace(go.Scatter(
                    x=series['date'],
                    y=series['value'],
                    mode='lines+markers',
                    name=label,
                    line=dict(width=self.line_width, color=self.series_color(label)),
                    marker=dict(size=self.marker_size, color=self.series_color(label))
                ))

            fig.update_layout(
                title=title,
                xaxis_title='Date',
                yaxis_title=index.get('axis_title', index.get('label', '')),
                height=self.height,
                showlegend=True,
                hovermode='x unified',
                margin=dict(l=50, r=20, t=50, b=40),
                legend=dict(orientation='h', y=-0.2)
            )

            return fig

        except Exception as e:
            logger.error(f"Error creating time series plot: {e}")
            return self._create_empty_plot(f"Error creating time series plot: {str(e)}")

    def _create_empty_plot(self, message: str) -> go.Figure:
        """Create an empty plot with a message."""
        fig = go.Figure()
        fig.add_annotation(
            text=message,
            xref="paper", yref="paper",
            x=0.5, y=0.5,
            xanchor='center', yanchor='middle',
            showarrow=False,
            font=dict(size=14, color="gray")
        )
        fig.update_layout(
            xaxis=dict(showgrid=False, showticklabels=False, zeroline=False),
            yaxis=dict(showgrid=False, showticklabels=False, zeroline=False),
            height=self.height
        )
        return fig
