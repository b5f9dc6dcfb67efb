"""
API route modules
"""

__all__ = ["articles", "comments", "newsletter"]
