"""
Document models for the STEM Forum collections
"""

from stemforum.models.article import Article, Like
from stemforum.models.comment import Comment
from stemforum.models.newsletter import NewsletterSubscription

__all__ = ["Article", "Like", "Comment", "NewsletterSubscription"]
