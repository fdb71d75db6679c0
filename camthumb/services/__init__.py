# camthumb/services/__init__.py
"""
Services package exports.
"""
from .thumbnail_service import ThumbnailService

__all__ = ["ThumbnailService"]
