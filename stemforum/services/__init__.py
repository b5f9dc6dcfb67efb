"""
Business logic services
"""

__all__ = ["article_service", "comment_service", "newsletter_service"]
