#!/usr/bin/env python3
"""
Data Validation Module

This module contains data validation utilities for ensuring the dashboard
configuration and Earth Engine request parameters are consistent.
"""

from .validation import (
    validate_file_exists,
    validate_date_range,
    validate_hex_color,
    validate_vis_params,
    validate_dates_config,
    validate_dashboard_config
)

__all__ = [
    'validate_file_exists',
    'validate_date_range',
    'validate_hex_color',
    'validate_vis_params',
    'validate_dates_config',
    'validate_dashboard_config'
]
