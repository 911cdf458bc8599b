"""Single-page PDF rendering of text and raster image sources."""

from __future__ import annotations

from ..base import ConversionInput, ConversionOutput, ConversionPlugin
from ..registry import REGISTRY
from ..utils import extract_text, is_textual
from ...categories import Category
from ...codecs import render_blank_pdf, render_image_pdf, render_text_pdf
from ...models import SourceFile

MAX_LINES = 40
MAX_LINE_CHARS = 80
EMBEDDABLE_IMAGES = ("png", "jpeg", "jpg")


def _embeddable_image(source: SourceFile) -> bool:
    if source.category is not Category.IMAGE and not source.media_type.startswith("image/"):
        return False
    subtype = source.media_type.split("/", 1)[-1] if "/" in source.media_type else ""
    return subtype in EMBEDDABLE_IMAGES or source.suffix in EMBEDDABLE_IMAGES


class PdfPlugin(ConversionPlugin):
    slug = "to-pdf"
    target_formats = ("pdf",)
    media_type = "application/pdf"

    def convert(self, payload: ConversionInput) -> ConversionOutput:
        source = payload.source
        if is_textual(source):
            lines = extract_text(source).split("\n")[:MAX_LINES]
            data = render_text_pdf([line.rstrip("\r")[:MAX_LINE_CHARS] for line in lines])
        elif _embeddable_image(source):
            data = render_image_pdf(source.payload)
        else:
            data = render_blank_pdf()
        return self.output(data, "pdf")


REGISTRY.register(PdfPlugin)
