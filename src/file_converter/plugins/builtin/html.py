"""HTML rendering: document markup, data listings and a file summary page."""

from __future__ import annotations

from datetime import datetime
from html import escape

from ..base import ConversionInput, ConversionOutput, ConversionPlugin
from ..registry import REGISTRY
from ..utils import decode_text, load_structured, rich_markup, size_kb, to_json
from ...categories import Category

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
    body {{ font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; }}
    .metadata {{ background: #f5f5f5; padding: 10px; margin-bottom: 20px; border-radius: 5px; white-space: pre-wrap; }}
  </style>
</head>
<body>
{metadata}{body}
</body>
</html>
"""

DATA_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>Data Visualization - {title}</title>
  <style>
    body {{ font-family: Arial, sans-serif; margin: 20px; }}
    pre {{ background: #f5f5f5; padding: 15px; border-radius: 5px; overflow-x: auto; }}
  </style>
</head>
<body>
  <h1>Data: {title}</h1>
  <pre><code>{data}</code></pre>
</body>
</html>
"""

SUMMARY_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>{title}</title>
</head>
<body>
  <h1>{title}</h1>
  <p><strong>Original Type:</strong> {media_type}</p>
  <p><strong>Size:</strong> {size}</p>
  <p><strong>Converted:</strong> {converted}</p>
{metadata}</body>
</html>
"""


class HtmlPlugin(ConversionPlugin):
    slug = "to-html"
    target_formats = ("html",)
    media_type = "text/html"

    def convert(self, payload: ConversionInput) -> ConversionOutput:
        source = payload.source
        title = escape(source.stem)
        metadata_json = escape(to_json(payload.metadata)) if payload.include_metadata and payload.metadata else ""

        if source.category is Category.DOCUMENT:
            block = f'<div class="metadata">{metadata_json}</div>\n' if metadata_json else ""
            html = DOCUMENT_TEMPLATE.format(title=title, metadata=block, body=rich_markup(source))
        elif source.category is Category.DATA:
            try:
                data = load_structured(source)
            except ValueError:
                data = {"content": decode_text(source.payload)}
            html = DATA_TEMPLATE.format(title=title, data=escape(to_json(data)))
        else:
            block = f"  <pre>{metadata_json}</pre>\n" if metadata_json else ""
            html = SUMMARY_TEMPLATE.format(
                title=title,
                media_type=escape(source.media_type),
                size=size_kb(source),
                converted=datetime.now().strftime("%d.%m.%Y %H:%M:%S"),
                metadata=block,
            )
        return self.output(html, "html")


REGISTRY.register(HtmlPlugin)
