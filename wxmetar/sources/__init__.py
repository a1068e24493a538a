"""
Document sources for the wxmetar library.

Sources retrieve the raw METAR XML documents for a station and keep a
per-station copy on disk.
"""

from .cached import CachedSource
from .aviationweather import AviationWeatherSource

__all__ = [
    'CachedSource',
    'AviationWeatherSource',
]
