"""Markdown output derived from document markup."""

from __future__ import annotations

import re
from html import unescape

from ..base import ConversionInput, ConversionOutput, ConversionPlugin
from ..registry import REGISTRY
from ..utils import rich_markup, to_json
from ...categories import Category
from ...metadata import utc_timestamp

SUBSTITUTIONS = (
    (re.compile(r"<h1>"), "# "),
    (re.compile(r"<h2>"), "## "),
    (re.compile(r"<h[3-6]>"), "### "),
    (re.compile(r"</h[1-6]>"), "\n\n"),
    (re.compile(r"<p>"), ""),
    (re.compile(r"</p>"), "\n\n"),
    (re.compile(r"<br\s*/?>"), "\n"),
    (re.compile(r"</?strong>"), "**"),
    (re.compile(r"</?em>"), "*"),
)


def markup_to_markdown(markup: str) -> str:
    text = markup
    for pattern, replacement in SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return unescape(text).strip() + "\n"


class MarkdownPlugin(ConversionPlugin):
    slug = "to-md"
    target_formats = ("md",)
    media_type = "text/markdown"

    def convert(self, payload: ConversionInput) -> ConversionOutput:
        source = payload.source
        if source.category is Category.DOCUMENT:
            return self.output(markup_to_markdown(rich_markup(source)), "md")

        text = (
            f"# {source.stem}\n\n"
            f"**Original Format:** {source.media_type}\n\n"
            f"**Converted:** {utc_timestamp()}\n"
        )
        if payload.include_metadata and payload.metadata:
            text += f"\n## Metadata\n\n```json\n{to_json(payload.metadata)}\n```\n"
        return self.output(text, "md")


REGISTRY.register(MarkdownPlugin)
