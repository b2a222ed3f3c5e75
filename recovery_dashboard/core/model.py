#!/usr/bin/env python3
"""
Data Model for the Recovery Dashboard

This module defines the information presented by the dashboard: the study
date range, the regions used as chart series and map outlines, and the
vegetation/moisture indices with their visualization parameters.

The model is a set of plain dictionaries keyed by identifier so that widgets
can be parameterized from it and so that the lookup helpers below can scan it.
"""

from typing import Dict, Any, List, Optional
import logging

logger = logging.getLogger(__name__)


# Shared green ramp used by all index layers
NDVI_PALETTE = [
    'FFFFFF', 'CE7E45', 'DF923D', 'F1B555', 'FCD163', '99B718', '74A901',
    '66A000', '529400', '3E8601', '207401', '056201', '004C00', '023B01',
    '012E01', '011D01', '011301'
]

DEFAULT_REGIONS = {
    'burn_scar': {
        'label': '2018 Holy Fire burn scar',
        'legend_name': '2018 Holy Fire Perimeter',
        'layer_name': '2018 Holy Fire',
        'color': 'ffcc5c'
    },
    'santiago': {
        'label': 'Santiago',
        'legend_name': 'Santiago',
        'layer_name': 'Santiago',
        'color': '22ff00'
    },
    'coldwater': {
        'label': 'Coldwater',
        'legend_name': 'Coldwater',
        'layer_name': 'Coldwater',
        'color': '4040a1'
    }
}

DEFAULT_INDICES = {
    'ET': {
        'band': 'ET',
        'label': 'ET',
        'title': 'ECOSTRESS ET Recovery after 2018 Holy Fire',
        'axis_title': 'ET (mm/day)',
        'scale': 70,
        'display': False,
        'vis': {'min': 0, 'max': 10, 'palette': NDVI_PALETTE}
    },
    'EVI': {
        'band': 'EVI',
        'label': 'EVI',
        'title': 'L8 EVI Recovery after 2018 Holy Fire',
        'axis_title': 'EVI',
        'scale': 30,
        'display': True,
        'vis': {'min': 0, 'max': 1, 'palette': NDVI_PALETTE}
    },
    'NDVI': {
        'band': 'NDVI',
        'label': 'NDVI',
        'title': 'S2 NDVI Recovery after 2018 Holy Fire',
        'axis_title': 'NDVI',
        'scale': 10,
        'display': True,
        'vis': {'min': 0, 'max': 1, 'palette': NDVI_PALETTE}
    }
}


def get_property_value_list(data_model_dict: Dict[str, Dict[str, Any]],
                            property_name: str) -> List[Any]:
    """Get a list of values for a specified property name."""
    return [entry.get(property_name) for entry in data_model_dict.values()]


def find_key(data_model_dict: Dict[str, Dict[str, Any]], property_name: str,
             property_value: Any) -> Optional[str]:
    """Find the first dictionary key for a specified property value."""
    for key, entry in data_model_dict.items():
        if entry.get(property_name) == property_value:
            return key
    return None


def _merge_entries(defaults: Dict[str, Dict[str, Any]],
                   configured: Optional[Dict[str, Dict[str, Any]]]) -> Dict[str, Dict[str, Any]]:
    # Configured entries keep their own order; defaults fill missing fields
    if not configured:
        return {key: dict(entry) for key, entry in defaults.items()}

    merged = {}
    for key, entry in configured.items():
        base = dict(defaults.get(key, {}))
        base.update(entry or {})
        if 'vis' in base:
            vis = dict(defaults.get(key, {}).get('vis', {}))
            vis.update(base['vis'] or {})
            base['vis'] = vis
        merged[key] = base
    return merged


def build_data_model(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the dashboard data model from configuration.

    Args:
        config: Parsed dashboard configuration

    Returns:
        Dictionary with 'dates', 'regions' and 'indices' sections
    """
    dates_config = config.get('dates') or {}

    model = {
        'dates': {
            'start': dates_config.get('start') or '2018-07-01',
            'end': dates_config.get('end'),
            'period_days': dates_config.get('period_days', 30),
            'start_year': dates_config.get('start_year', 2018),
            'end_year': dates_config.get('end_year', 2030)
        },
        'regions': _merge_entries(DEFAULT_REGIONS, config.get('regions')),
        'indices': _merge_entries(DEFAULT_INDICES, config.get('indices'))
    }

    logger.info(f"Data model built with {len(model['regions'])} regions "
                f"and {len(model['indices'])} indices")
    return model


def displayed_indices(data_model: Dict[str, Any]) -> List[str]:
    """Keys of the indices shown as charts and map layers, in model order."""
    indices = data_model.get('indices', {})
    return [key for key, entry in indices.items() if entry.get('display', True)]
