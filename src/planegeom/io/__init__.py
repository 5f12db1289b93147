"""
Well-known text and well-known binary codecs.
"""

from . import wkb, wkt

__all__ = ['wkb', 'wkt']
