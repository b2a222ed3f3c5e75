#!/usr/bin/env python3
"""
Holy Fire Vegetation Recovery Dashboard

Main application file: visualizes monthly composites of Earth Engine
evapotranspiration and vegetation indices over the 2018 Holy Fire burn scar
and two neighbouring watersheds, with a date slider selecting the composite
window shown on the map.
"""

import dash
from dash import html, Input, Output
import dash_bootstrap_components as dbc
from datetime import datetime
from urllib.parse import parse_qs
import logging
from pathlib import Path
import sys
import traceback

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

# Import dashboard components
from recovery_dashboard.core.data_manager import DashboardDataManager
from recovery_dashboard.core.periods import period_index_for_date
from recovery_dashboard.components.layout import DashboardLayout
from recovery_dashboard.components.map_component import MapComponent
from recovery_dashboard.components.plots import PlotComponents
from recovery_dashboard.components.controls import ControlComponents

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Dash app
app = dash.Dash(
    __name__,
    external_stylesheets=[dbc.themes.BOOTSTRAP],
    suppress_callback_exceptions=True,
    title="Holy Fire Vegetation Recovery",
)

# Initialize core components
index_keys = []
try:
    data_manager = DashboardDataManager()
    layout_manager = DashboardLayout(data_manager.config)
    map_component = MapComponent(data_manager.config, data_manager.data_model)
    plot_components = PlotComponents(data_manager.config, data_manager.regions)
    control_components = ControlComponents(data_manager.config)
    index_keys = data_manager.get_displayed_indices()

    logger.info("Dashboard components initialized successfully")
except Exception as e:
    logger.error(f"Error initializing dashboard components: {e}")
    traceback.print_exc()


# Layout is rebuilt per page load
def serve_layout():
    """Build the layout on every page load so the slider reaches the current window."""
    try:
        data_manager.refresh_periods()
        layout = layout_manager.create_main_layout(data_manager.periods, index_keys)
        logger.info(f"App layout created with {len(data_manager.periods)} windows "
                    f"and {len(index_keys)} charts")
        return layout
    except Exception as e:
        logger.error(f"Error creating app layout: {e}")
        return html.Div([
            html.H1("Dashboard Error", className="text-center text-danger"),
            html.P(f"Error initializing dashboard: {str(e)}", className="text-center"),
            html.P("Please check the configuration and Earth Engine credentials.",
                   className="text-center text-muted")
        ])


app.layout = serve_layout


def slider_value_from_search(search, periods):
    """Slider position for a '?date=YYYY-MM-DD' query string, None if absent or invalid."""
    if not search or not periods:
        return None

    values = parse_qs(search.lstrip('?')).get('date')
    if not values:
        return None

    try:
        return period_index_for_date(periods, values[0])
    except (ValueError, TypeError) as e:
        logger.warning(f"Ignoring invalid date parameter {values[0]!r}: {e}")
        return None


# Callback initializing the slider from URL parameters
@app.callback(
    Output('date-slider', 'value'),
    Input('url', 'search'),
    prevent_initial_call=False
)
def initialize_slider(search):
    """Select the window named by the URL, if any."""
    data_manager.refresh_periods()
    value = slider_value_from_search(search, data_manager.periods)
    if value is None:
        return dash.no_update
    return value


# Callback re-rendering the map when the slider moves
@app.callback(
    [Output('map-container', 'children'),
     Output('window-info', 'children')],
    Input('date-slider', 'value'),
    prevent_initial_call=False
)
def update_map(period_index):
    """Reset the map layers to the composites of the selected window."""
    try:
        window = data_manager.get_window(period_index)
        logger.info(f"Rendering composites for window {window[0]} to {window[1]}")

        tiles = data_manager.get_layer_tiles(*window)
        geojson = data_manager.get_region_geojson()
        window_info = control_components.update_window_info(window)

        if not tiles:
            window_info += " (no imagery could be rendered)"

        return map_component.create_map(tiles, geojson), window_info

    except Exception as e:
        logger.error(f"Critical error in map callback: {e}")
        traceback.print_exc()
        return (html.P(f"Critical map error: {str(e)}", className="text-center text-danger"),
                "Error")


# Callback for chart updates
@app.callback(
    [Output(f'timeseries-{key}', 'figure') for key in index_keys] +
    [Output('data-summary-content', 'children'),
     Output('last-update', 'children')],
    Input('reload-series-btn', 'n_clicks'),
    prevent_initial_call=False
)
def update_charts(n_clicks):
    """Render one time-series chart per displayed index."""
    figures = []
    for key in index_keys:
        try:
            series = data_manager.get_time_series(key, force_reload=bool(n_clicks))
            figures.append(plot_components.create_time_series_plot(series, data_manager.indices[key]))
        except Exception as e:
            logger.error(f"Error updating {key} chart: {e}")
            figures.append(plot_components._create_empty_plot(f"Error creating {key} chart: {str(e)}"))

    summary = control_components.update_data_summary(data_manager.get_data_summary())
    last_update = f"Last updated: {datetime.now().strftime('%H:%M:%S')}"

    return figures + [summary, last_update]


# Callback for clear cache
@app.callback(
    Output('status-badge', 'children'),
    Input('clear-cache-btn', 'n_clicks'),
    prevent_initial_call=True
)
def clear_cache(n_clicks):
    """Clear data cache."""
    if n_clicks:
        data_manager.clear_cache()
        return "Cache Cleared"
    return "Ready"


if __name__ == '__main__':
    # Get configuration
    config = data_manager.config
    app_config = config.get('app', {})

    # Run the app
    app.run(
        debug=app_config.get('debug', False),
        host=app_config.get('host', '127.0.0.1'),
        port=app_config.get('port', 8050)
    )
