# src/review_relay/providers/__init__.py
from .base import ReviewProvider
from .review_api import ReviewApiProvider

__all__ = ["ReviewProvider", "ReviewApiProvider"]
