#!/usr/bin/env python3
"""
Data Validation Module

Validation utilities for the dashboard configuration and the values that
parameterize Earth Engine requests.
"""

import re
import logging
from datetime import date
from pathlib import Path
from typing import Dict, Any, List, Union

import pandas as pd

logger = logging.getLogger(__name__)

HEX_COLOR_PATTERN = re.compile(r'^#?[0-9A-Fa-f]{6}$')


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_file_exists(file_path: Union[str, Path]) -> bool:
    """Check that a file exists, logging when it does not."""
    exists = Path(file_path).exists()
    if not exists:
        logger.warning(f"File not found: {file_path}")
    return exists


def validate_date_range(start, end) -> None:
    """
    Validate date ordering.

    Raises:
        ValueError: If either date cannot be parsed or start is not before end
    """
    try:
        start_ts = pd.to_datetime(start)
        end_ts = pd.to_datetime(end)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid date in range ({start}, {end}): {e}")

    if start_ts >= end_ts:
        raise ValueError(f"Start date {start} must be before end date {end}")


def validate_hex_color(color: str) -> bool:
    """Check a 6-digit hex colour, with or without a leading '#'."""
    return isinstance(color, str) and bool(HEX_COLOR_PATTERN.match(color))


def validate_vis_params(vis: Dict[str, Any]) -> List[str]:
    """
    Validate visualization parameters of an index layer.

    Returns:
        List of problems found, empty when valid
    """
    errors = []

    if 'min' not in vis or 'max' not in vis:
        errors.append("Visualization parameters need 'min' and 'max'")
    elif not _is_number(vis['min']) or not _is_number(vis['max']):
        errors.append(f"Visualization min and max must be numbers, got {vis['min']!r} and {vis['max']!r}")
    elif vis['min'] >= vis['max']:
        errors.append(f"Visualization min {vis['min']} must be below max {vis['max']}")

    palette = vis.get('palette', [])
    if not palette:
        errors.append("Visualization palette is empty")
    for color in palette:
        if not validate_hex_color(color):
            errors.append(f"Invalid palette colour: {color}")

    return errors


def validate_dates_config(dates: Dict[str, Any]) -> List[str]:
    """
    Validate the 'dates' section of the data model.

    An empty end is checked against today.

    Returns:
        List of problems found, empty when valid
    """
    errors = []

    if not dates.get('start'):
        errors.append("dates.start is required")
    else:
        try:
            validate_date_range(dates['start'], dates.get('end') or date.today())
        except ValueError as e:
            errors.append(str(e))

    period_days = dates.get('period_days')
    if not isinstance(period_days, int) or isinstance(period_days, bool):
        errors.append(f"period_days must be an integer, got {period_days!r}")
    elif period_days <= 0:
        errors.append("period_days must be positive")

    start_year = dates.get('start_year')
    end_year = dates.get('end_year')
    if not isinstance(start_year, int) or not isinstance(end_year, int):
        errors.append(f"start_year and end_year must be integers, got {start_year!r} and {end_year!r}")
    elif start_year > end_year:
        errors.append("start_year must not be after end_year")

    return errors


def validate_dashboard_config(data_model: Dict[str, Any]) -> List[str]:
    """
    Validate the dashboard data model built from configuration.

    Args:
        data_model: Dictionary with 'dates', 'regions' and 'indices'

    Returns:
        List of problems found, empty when valid
    """
    errors = validate_dates_config(data_model.get('dates') or {})

    regions = data_model.get('regions', {})
    if not regions:
        errors.append("At least one region is required")
    for region_id, region in regions.items():
        if not region.get('label'):
            errors.append(f"Region '{region_id}' has no label")
        if not validate_hex_color(region.get('color', '')):
            errors.append(f"Region '{region_id}' has an invalid colour")
        region_filter = region.get('filter')
        if region_filter is not None and not isinstance(region_filter, dict):
            errors.append(f"Region '{region_id}' filter must be a mapping of property to value")
        elif region_filter and not region.get('asset'):
            errors.append(f"Region '{region_id}' has a filter but no asset")

    for index_key, index in data_model.get('indices', {}).items():
        for problem in validate_vis_params(index.get('vis', {})):
            errors.append(f"{index_key}: {problem}")
        if not _is_number(index.get('scale')) or index['scale'] <= 0:
            errors.append(f"{index_key}: scale must be positive")

    return errors
