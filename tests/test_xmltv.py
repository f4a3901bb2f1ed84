import io
import xml.etree.ElementTree as ET
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from tvgrab.models import Programme
from tvgrab.xmltv import XMLTVWriter, format_time

TZ = ZoneInfo("Europe/Oslo")
CHANNEL = "nrk1.tvguiden.no"


def programme(**kwargs):
    fields = {
        "channel": CHANNEL,
        "start": datetime(2024, 3, 1, 21, 30, tzinfo=TZ),
        "title": "Vera",
    }
    fields.update(kwargs)
    return Programme(**fields)


def render(channels, programmes, **kwargs):
    output = io.StringIO()
    with XMLTVWriter(output, "tv_grab_no/0.1.0", lang="nb", **kwargs) as writer:
        for channel_id, name in channels:
            writer.write_channel(channel_id, name)
        for item in programmes:
            writer.write_programme(item)
    return output.getvalue()


def parse(document):
    # Skip the XML declaration and the DOCTYPE line.
    return ET.fromstring(document.split("\n", 2)[2])


def test_format_time():
    assert format_time(datetime(2024, 3, 1, 21, 30, tzinfo=TZ)) == "20240301213000 +0100"
    assert format_time(datetime(2024, 7, 1, 6, 0, tzinfo=TZ)) == "20240701060000 +0200"


def test_document_header():
    document = render([(CHANNEL, "NRK1")], [])
    lines = document.splitlines()
    assert lines[0] == '<?xml version="1.0" encoding="utf-8"?>'
    assert lines[1] == '<!DOCTYPE tv SYSTEM "xmltv.dtd">'
    root = parse(document)
    assert root.tag == "tv"
    assert root.get("generator-info-name") == "tv_grab_no/0.1.0"


def test_source_url():
    root = parse(render([], [], source_url="https://www.tvguiden.no"))
    assert root.get("source-info-url") == "https://www.tvguiden.no"


def test_channel_element():
    root = parse(render([(CHANNEL, "NRK1")], []))
    channel = root.find("channel")
    assert channel.get("id") == CHANNEL
    assert channel.find("display-name").text == "NRK1"
    assert channel.find("display-name").get("lang") == "nb"


def test_minimal_programme():
    root = parse(render([(CHANNEL, "NRK1")], [programme()]))
    element = root.find("programme")
    assert element.get("start") == "20240301213000 +0100"
    assert element.get("stop") is None
    assert element.get("channel") == CHANNEL
    assert [child.tag for child in element] == ["title"]
    assert element.find("title").text == "Vera"
    assert element.find("title").get("lang") == "nb"


def test_full_programme_in_dtd_order():
    item = programme(
        stop=datetime(2024, 3, 1, 23, 0, tzinfo=TZ),
        sub_title="Hidden Depths",
        description="Britisk krimserie.",
        category="Krim",
        season=2,
        episode=5,
        episode_total=13,
        rerun=True,
        new=True,
        subtitled=True,
    )
    element = parse(render([(CHANNEL, "NRK1")], [item])).find("programme")
    assert element.get("stop") == "20240301230000 +0100"
    assert [child.tag for child in element] == [
        "title",
        "sub-title",
        "desc",
        "category",
        "episode-num",
        "previously-shown",
        "new",
        "subtitles",
    ]
    assert element.find("episode-num").get("system") == "xmltv_ns"
    assert element.find("episode-num").text == "1.4/13."
    assert element.find("subtitles").get("type") == "teletext"
    assert element.find("desc").text == "Britisk krimserie."


def test_special_characters_are_escaped():
    document = render([(CHANNEL, "NRK1")], [programme(title="Havet & <fjellet>")])
    assert "Havet &amp; &lt;fjellet&gt;" in document
    assert parse(document).find("programme/title").text == "Havet & <fjellet>"


def test_channels_come_before_programmes():
    output = io.StringIO()
    writer = XMLTVWriter(output, "tv_grab_no")
    writer.write_channel(CHANNEL, "NRK1")
    writer.write_programme(programme())
    writer.write_channel("tv2.tvguiden.no", "TV 2")
    writer.end()
    tags = [child.tag for child in parse(output.getvalue())]
    assert tags == ["channel", "channel", "programme"]


def test_duplicate_channel_rejected():
    writer = XMLTVWriter(io.StringIO(), "tv_grab_no")
    writer.write_channel(CHANNEL, "NRK1")
    with pytest.raises(ValueError):
        writer.write_channel(CHANNEL, "NRK1 igjen")


def test_programme_for_unknown_channel_rejected():
    writer = XMLTVWriter(io.StringIO(), "tv_grab_no")
    with pytest.raises(ValueError):
        writer.write_programme(programme())


def test_writing_after_end_rejected():
    output = io.StringIO()
    writer = XMLTVWriter(output, "tv_grab_no")
    writer.end()
    with pytest.raises(ValueError):
        writer.write_channel(CHANNEL, "NRK1")
    writer.end()
    assert output.getvalue().count("<tv") == 1


def test_no_output_when_block_fails():
    output = io.StringIO()
    with pytest.raises(RuntimeError):
        with XMLTVWriter(output, "tv_grab_no") as writer:
            writer.write_channel(CHANNEL, "NRK1")
            raise RuntimeError("grab failed")
    assert output.getvalue() == ""
