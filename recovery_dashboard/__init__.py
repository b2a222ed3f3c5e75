"""
Holy Fire Vegetation Recovery Dashboard

Dashboard package for interactive web-based visualization of post-fire
evapotranspiration and vegetation index recovery from Earth Engine imagery.
"""

__version__ = "1.0.0"
