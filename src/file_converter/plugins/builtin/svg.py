"""Decorative SVG file card."""

from __future__ import annotations

from datetime import datetime
from html import escape

from ..base import ConversionInput, ConversionOutput, ConversionPlugin
from ..registry import REGISTRY
from ..utils import size_kb

CARD_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<svg width="800" height="600" xmlns="http://www.w3.org/2000/svg">
  <defs>
    <linearGradient id="bg" x1="0%" y1="0%" x2="100%" y2="100%">
      <stop offset="0%" style="stop-color:#667eea;stop-opacity:1" />
      <stop offset="100%" style="stop-color:#764ba2;stop-opacity:1" />
    </linearGradient>
  </defs>
  <rect width="800" height="600" fill="url(#bg)" />
  <rect x="50" y="50" width="700" height="500" fill="white" rx="20" opacity="0.95" />
  <text x="400" y="150" font-family="Arial, sans-serif" font-size="32" font-weight="bold" text-anchor="middle" fill="#333">{title}</text>
  <text x="400" y="250" font-family="Arial, sans-serif" font-size="20" text-anchor="middle" fill="#666">Original Type: {media_type}</text>
  <text x="400" y="300" font-family="Arial, sans-serif" font-size="20" text-anchor="middle" fill="#666">Size: {size}</text>
  <text x="400" y="350" font-family="Arial, sans-serif" font-size="20" text-anchor="middle" fill="#666">Converted: {converted}</text>
  <circle cx="400" cy="450" r="40" fill="#667eea" opacity="0.3" />
</svg>
"""


class SvgPlugin(ConversionPlugin):
    slug = "to-svg"
    target_formats = ("svg",)
    media_type = "image/svg+xml"

    def convert(self, payload: ConversionInput) -> ConversionOutput:
        source = payload.source
        svg = CARD_TEMPLATE.format(
            title=escape(source.stem),
            media_type=escape(source.media_type),
            size=size_kb(source),
            converted=datetime.now().strftime("%d.%m.%Y"),
        )
        return self.output(svg, "svg")


REGISTRY.register(SvgPlugin)
