"""
STEM Forum API Package
"""

__version__ = "1.0.0"
__app_name__ = "STEM October Forum API"
