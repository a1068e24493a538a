"""Renderers turning a MetarReport into text."""

from wxmetar.render.decoded import DecodedRenderer
from wxmetar.render.template import TemplateRenderer, BoundedBuffer, PLACEHOLDER_VERSION

__all__ = [
    'DecodedRenderer',
    'TemplateRenderer',
    'BoundedBuffer',
    'PLACEHOLDER_VERSION',
]
