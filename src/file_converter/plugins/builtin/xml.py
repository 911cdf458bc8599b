"""XML file-descriptor output."""

from __future__ import annotations

from ..base import ConversionInput, ConversionOutput, ConversionPlugin
from ..registry import REGISTRY
from ..utils import to_json
from ...metadata import utc_timestamp


def cdata(text: str) -> str:
    """Wrap ``text`` in CDATA, splitting any embedded terminator."""

    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


class XmlPlugin(ConversionPlugin):
    slug = "to-xml"
    target_formats = ("xml",)
    media_type = "application/xml"

    def convert(self, payload: ConversionInput) -> ConversionOutput:
        source = payload.source
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            "<file>",
            f"  <name>{cdata(source.stem)}</name>",
            f"  <type>{cdata(source.media_type)}</type>",
            f"  <size>{source.size}</size>",
            f"  <convertedAt>{utc_timestamp()}</convertedAt>",
        ]
        if payload.metadata:
            lines.append(f"  <metadata>{cdata(to_json(payload.metadata))}</metadata>")
        lines.append("</file>")
        return self.output("\n".join(lines) + "\n", "xml")


REGISTRY.register(XmlPlugin)
