"""
farmdesk - farm management dashboard backend.
"""
__version__ = "0.1.0"
