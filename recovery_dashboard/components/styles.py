#!/usr/bin/env python3
"""
Style Definitions for the Recovery Dashboard

CSS-like class styles shared by several widgets. Single-use styles are set
inline where the widget is created.
"""

from typing import Dict, Any

PANEL_WIDTH = '500px'

STYLES: Dict[str, Dict[str, Any]] = {
    'side_panel': {
        'width': PANEL_WIDTH,
        'minWidth': PANEL_WIDTH,
        'height': '100vh',
        'overflowY': 'auto',
        'padding': '12px',
        'backgroundColor': '#f8f9fa'
    },
    'map_area': {
        'flex': '1',
        'height': '100vh',
        'padding': '12px'
    },
    'legend_panel': {
        'position': 'absolute',
        'bottom': '20px',
        'right': '10px',
        'zIndex': 1000,
        'padding': '8px 15px',
        'backgroundColor': 'white',
        'borderRadius': '4px',
        'boxShadow': '0 1px 4px rgba(0, 0, 0, 0.3)'
    },
    'legend_title': {
        'fontWeight': 'bold',
        'fontSize': '12px',
        'margin': '0 0 4px 0',
        'padding': '0'
    },
    'legend_label': {
        'fontSize': '12px',
        'margin': '0'
    },
    'legend_gradient': {
        'width': '10px',
        'height': '100px',
        'margin': '4px 0',
        'border': '1px solid #ccc'
    },
    'legend_color_box': {
        'display': 'inline-block',
        'padding': '8px',
        'margin': '0 0 4px 0'
    },
    'legend_description': {
        'display': 'inline-block',
        'margin': '0 0 4px 6px',
        'fontSize': '12px',
        'verticalAlign': 'top'
    },
    'intro_text': {
        'fontSize': '14px',
        'color': '#495057'
    }
}


def with_style(name: str, **overrides) -> Dict[str, Any]:
    """Copy of a class style with inline overrides applied on top."""
    style = dict(STYLES.get(name, {}))
    style.update(overrides)
    return style
