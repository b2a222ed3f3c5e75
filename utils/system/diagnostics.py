#!/usr/bin/env python3
"""
System Diagnostics Module

Checks the environment the dashboard needs before it starts: installed
packages, configuration files, and Earth Engine credentials.
"""

import importlib.util
import logging
import os
from pathlib import Path
from typing import Dict, Any, List

logger = logging.getLogger(__name__)

REQUIRED_PACKAGES = [
    'dash', 'dash_bootstrap_components', 'dash_leaflet',
    'plotly', 'pandas', 'numpy', 'yaml', 'ee', 'google.oauth2'
]

ESSENTIAL_PATHS = [
    Path("config") / "dashboard_config.yaml",
    Path("config") / "regions.geojson"
]


def _package_available(name: str) -> bool:
    try:
        return importlib.util.find_spec(name) is not None
    except ModuleNotFoundError:
        return False


def diagnose_system_environment() -> Dict[str, Any]:
    """
    Diagnose installed packages.

    Returns:
        Dictionary with status and the missing packages
    """
    missing = [name for name in REQUIRED_PACKAGES if not _package_available(name)]
    return {
        'status': 'ok' if not missing else 'error',
        'missing_packages': missing
    }


def diagnose_data_availability(base_path: Path = Path(".")) -> Dict[str, Any]:
    """
    Diagnose configuration file availability.

    Returns:
        Dictionary with status and the missing paths
    """
    missing = [str(path) for path in ESSENTIAL_PATHS if not (base_path / path).exists()]
    return {
        'status': 'ok' if not missing else 'error',
        'missing_paths': missing
    }


def diagnose_credentials() -> Dict[str, Any]:
    """
    Diagnose which Earth Engine credential source will be used.

    Returns:
        Dictionary with status and the credential source
    """
    if os.getenv("EE_SERVICE_ACCOUNT_JSON"):
        return {'status': 'ok', 'source': 'service account (EE_SERVICE_ACCOUNT_JSON)'}

    key_file = os.getenv("EE_SERVICE_ACCOUNT_FILE")
    if key_file:
        if Path(key_file).exists():
            return {'status': 'ok', 'source': f'service account file ({key_file})'}
        return {'status': 'error', 'source': f'missing service account file ({key_file})'}

    return {'status': 'warning', 'source': 'default credentials (run `earthengine authenticate`)'}


def generate_diagnostic_report(base_path: Path = Path(".")) -> str:
    """
    Generate diagnostic report.

    Returns:
        Diagnostic report string
    """
    environment = diagnose_system_environment()
    data = diagnose_data_availability(base_path)
    credentials = diagnose_credentials()

    lines: List[str] = ["Dashboard diagnostics:"]
    lines.append(f"  packages: {environment['status']}")
    for name in environment['missing_packages']:
        lines.append(f"    missing: {name}")
    lines.append(f"  configuration: {data['status']}")
    for path in data['missing_paths']:
        lines.append(f"    missing: {path}")
    lines.append(f"  credentials: {credentials['status']} - {credentials['source']}")

    return "\n".join(lines)
