"""Raster image re-encoding through Pillow."""

from __future__ import annotations

from ..base import ConversionInput, ConversionOutput, ConversionPlugin
from ..registry import REGISTRY
from ...codecs import encode_image

ICON_SIZE = (32, 32)


class _ImagePlugin(ConversionPlugin):
    extension: str = ""

    def convert(self, payload: ConversionInput) -> ConversionOutput:
        data = encode_image(payload.source.payload, self.target_formats[0], quality=payload.quality)
        return self.output(data, self.extension or self.target_formats[0])


class PngPlugin(_ImagePlugin):
    slug = "to-png"
    target_formats = ("png",)
    media_type = "image/png"


class JpegPlugin(_ImagePlugin):
    slug = "to-jpeg"
    target_formats = ("jpg", "jpeg")
    media_type = "image/jpeg"
    extension = "jpg"


class WebpPlugin(_ImagePlugin):
    slug = "to-webp"
    target_formats = ("webp",)
    media_type = "image/webp"


class GifPlugin(_ImagePlugin):
    slug = "to-gif"
    target_formats = ("gif",)
    media_type = "image/gif"


class BmpPlugin(_ImagePlugin):
    slug = "to-bmp"
    target_formats = ("bmp",)
    media_type = "image/bmp"


class TiffPlugin(_ImagePlugin):
    slug = "to-tiff"
    target_formats = ("tiff",)
    media_type = "image/tiff"


class IconPlugin(ConversionPlugin):
    slug = "to-ico"
    target_formats = ("ico",)
    media_type = "image/x-icon"

    def convert(self, payload: ConversionInput) -> ConversionOutput:
        data = encode_image(payload.source.payload, "ico", quality=payload.quality, size=ICON_SIZE)
        return self.output(data, "ico")


for plugin_cls in (PngPlugin, JpegPlugin, WebpPlugin, GifPlugin, BmpPlugin, TiffPlugin, IconPlugin):
    REGISTRY.register(plugin_cls)
