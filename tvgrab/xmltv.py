"""Writes channels and programmes as an XMLTV document."""

import typing
import xml.etree.ElementTree as ET
from datetime import datetime

from .models import Programme

TIME_FORMAT = "%Y%m%d%H%M%S %z"
DOCTYPE = '<!DOCTYPE tv SYSTEM "xmltv.dtd">'


def format_time(value: datetime) -> str:
    """Formats an aware datetime the way XMLTV expects, e.g. `20240101183000 +0100`."""
    return value.strftime(TIME_FORMAT)


class XMLTVWriter:
    """
    Collects channels and programmes and writes them as one `<tv>` document.

    Channels are always written before programmes, whatever order they were
    added in, and every programme must belong to a channel that was added.

    Example:
        with XMLTVWriter(sys.stdout, "tv_grab_no", lang="nb") as writer:
            writer.write_channel("nrk1.tv.no", "NRK1")
            writer.write_programme(programme)
    """

    def __init__(
        self,
        fh: typing.TextIO,
        generator_name: str,
        source_url: typing.Optional[str] = None,
        lang: typing.Optional[str] = None,
        encoding: str = "utf-8",
    ):
        self.fh = fh
        self.lang = lang
        self.encoding = encoding
        self.root = ET.Element("tv", {"generator-info-name": generator_name})
        if source_url:
            self.root.set("source-info-url", source_url)
        self._channels: typing.List[ET.Element] = []
        self._programmes: typing.List[ET.Element] = []
        self._channel_ids: typing.Set[str] = set()
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.end()

    def _text(self, parent: ET.Element, tag: str, text: str) -> ET.Element:
        element = ET.SubElement(parent, tag)
        element.text = text
        if self.lang and tag in ("title", "sub-title", "desc", "category", "display-name"):
            element.set("lang", self.lang)
        return element

    def _check_open(self):
        if self.closed:
            raise ValueError("The XMLTV document was already written")

    def write_channel(self, channel_id: str, display_name: str) -> None:
        self._check_open()
        if channel_id in self._channel_ids:
            raise ValueError(f"Channel '{channel_id}' was already written")
        self._channel_ids.add(channel_id)
        element = ET.Element("channel", {"id": channel_id})
        self._text(element, "display-name", display_name)
        self._channels.append(element)

    def write_programme(self, programme: Programme) -> None:
        self._check_open()
        if programme.channel not in self._channel_ids:
            raise ValueError(f"Programme for unknown channel '{programme.channel}'")

        element = ET.Element(
            "programme",
            {"start": format_time(programme.start), "channel": programme.channel},
        )
        if programme.stop is not None:
            element.set("stop", format_time(programme.stop))

        # Child order follows the XMLTV DTD.
        self._text(element, "title", programme.title)
        if programme.sub_title:
            self._text(element, "sub-title", programme.sub_title)
        if programme.description:
            self._text(element, "desc", programme.description)
        if programme.category:
            self._text(element, "category", programme.category)
        if programme.xmltv_ns:
            ET.SubElement(element, "episode-num", {"system": "xmltv_ns"}).text = (
                programme.xmltv_ns
            )
        if programme.rerun:
            ET.SubElement(element, "previously-shown")
        if programme.new:
            ET.SubElement(element, "new")
        if programme.subtitled:
            ET.SubElement(element, "subtitles", {"type": "teletext"})

        self._programmes.append(element)

    def end(self) -> None:
        """Writes the document. Nothing can be added afterwards."""
        if self.closed:
            return
        self.root.extend(self._channels)
        self.root.extend(self._programmes)
        ET.indent(self.root, space="  ")
        self.fh.write(f'<?xml version="1.0" encoding="{self.encoding}"?>\n')
        self.fh.write(DOCTYPE + "\n")
        self.fh.write(ET.tostring(self.root, encoding="unicode"))
        self.fh.write("\n")
        self.closed = True
