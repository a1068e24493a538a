"""
METAR/SPECI retrieval, decoding and rendering.

Reports come from the aviationweather.gov ADDS XML data server, are decoded
into MetarReport objects and rendered as raw text, as a decoded layout, or
through a user supplied template.

The main public API includes:
- MetarReport: One decoded observation
- MetarDocumentParser: Decode an ADDS XML document
- WeatherAnalyzer: Sky cover and flight category classification
- DecodedRenderer: Fixed human-readable layout
- TemplateRenderer: {placeholder} template substitution
- AviationWeatherSource: Cached document retrieval

Example:
    from wxmetar import AviationWeatherSource, MetarDocumentParser, DecodedRenderer

    source = AviationWeatherSource(cache_dir="/tmp")
    for report in MetarDocumentParser.parse_document(source.get_document("KPDX")):
        print(DecodedRenderer().render(report))
"""

from wxmetar.models import (
    MetarReport,
    FlightCategory,
    ReportType,
    SkyCover,
    SkyCondition,
    QualityFlag,
)
from wxmetar.parser import MetarDocumentParser
from wxmetar.analysis import WeatherAnalyzer
from wxmetar.render import DecodedRenderer, TemplateRenderer
from wxmetar.sources import CachedSource, AviationWeatherSource

__version__ = '0.1.0'
__all__ = [
    'MetarReport',
    'FlightCategory',
    'ReportType',
    'SkyCover',
    'SkyCondition',
    'QualityFlag',
    'MetarDocumentParser',
    'WeatherAnalyzer',
    'DecodedRenderer',
    'TemplateRenderer',
    'CachedSource',
    'AviationWeatherSource',
]
