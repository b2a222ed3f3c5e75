#!/usr/bin/env python3
"""
Dashboard Runner Script

Simple script to launch the Holy Fire Vegetation Recovery Dashboard
with environment checks and Earth Engine initialization up front.
"""

import sys
import logging
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from utils.system.diagnostics import (
    diagnose_system_environment,
    diagnose_data_availability,
    diagnose_credentials,
    generate_diagnostic_report
)


def check_requirements():
    """Check if required packages are installed."""
    environment = diagnose_system_environment()

    if environment['missing_packages']:
        print("Missing required packages:")
        for package in environment['missing_packages']:
            print(f"  - {package}")
        print("\nInstall the dashboard with:")
        print("pip install -e .")
        return False

    return True


def check_data_files():
    """Check if essential configuration files exist."""
    data = diagnose_data_availability(project_root)

    if data['missing_paths']:
        print("Missing essential configuration files:")
        for path in data['missing_paths']:
            print(f"  - {path}")
        return False

    return True


def main():
    """Main function to run the dashboard with checks."""
    print("Starting Holy Fire Vegetation Recovery Dashboard...")
    print("=" * 60)

    # Check requirements
    print("Checking requirements...")
    if not check_requirements():
        sys.exit(1)
    print("All required packages are installed")

    # Check configuration files
    print("Checking configuration files...")
    if not check_data_files():
        sys.exit(1)
    print("Essential configuration files found")

    credentials = diagnose_credentials()
    print(f"Earth Engine credentials: {credentials['source']}")
    if credentials['status'] == 'error':
        print(generate_diagnostic_report(project_root))
        sys.exit(1)

    # Set up logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        # Import and run the app
        print("Initializing dashboard...")
        from app import app, data_manager
        from recovery_dashboard.core.earth_engine import ee_initialize

        config = data_manager.config
        ee_initialize(config.get('earth_engine', {}))

        app_config = config.get('app', {})
        host = app_config.get('host', '127.0.0.1')
        port = app_config.get('port', 8050)
        debug = app_config.get('debug', False)

        print("Dashboard initialized successfully")
        print(f"Starting server at http://{host}:{port}")
        print("Press Ctrl+C to stop the server")
        print("=" * 60)

        # Run the server
        app.run(
            debug=debug,
            host=host,
            port=port,
            dev_tools_hot_reload=debug
        )

    except ImportError as e:
        print(f"Error importing dashboard components: {e}")
        print("Please check that all files are present and requirements are installed.")
        sys.exit(1)

    except Exception as e:
        print(f"Error starting dashboard: {e}")
        print("Check the configuration files and Earth Engine credentials.")
        sys.exit(1)


if __name__ == "__main__":
    main()
