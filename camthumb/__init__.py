# camthumb/__init__.py
"""
Cached camera thumbnails served over HTTP.
"""

__version__ = "0.1.0"
