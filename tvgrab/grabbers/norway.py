"""Grabber for Norwegian TV listings, read with regular expressions."""

# pylint: disable=C0116

import html
import re
import typing
from datetime import date
from zoneinfo import ZoneInfo

from ..models import Channel
from .base import Entry, Grabber

OPTION_RE = re.compile(
    r'<option\s+value="(?P<id>[^"]*)"'
    r'(?:\s+data-kringkaster="(?P<broadcaster>[^"]*)")?[^>]*>'
    r"(?P<name>.*?)</option>",
    re.S | re.I,
)
PROGRAM_RE = re.compile(
    r'<div class="program"[^>]*>\s*'
    r'<span class="tid">(?P<start>[^<]*)</span>\s*'
    r'<(?P<tag>a|span)\b[^>]*class="tittel"[^>]*>(?P<title>.*?)</(?P=tag)>'
    r'(?:\s*<p class="beskrivelse">(?P<info>.*?)</p>)?',
    re.S,
)
TAG_RE = re.compile(r"<[^>]+>")

RERUN_RE = re.compile(r"\(R\)|\bReprise\b\.?", re.I)
SUBTITLED_RE = re.compile(r"\(T\)|\bTekstet\b\.?|\bTekst-TV\s*\d*\.?", re.I)
EPISODE_RES = (
    re.compile(r"\((\d+):(\d+)\)"),
    re.compile(r"\bDel\s+(\d+)(?:\s+av\s+(\d+))?\.?"),
)
SEASON_RE = re.compile(r"\bSesong\s+(\d+)\.?", re.I)


def find_episode(text: str):
    """
    Finds the first episode marker in `text`.

    A total of zero, a total below the episode or a zero-padded total is a
    clock time such as `(20:00)`, not an episode.

    Returns:
        tuple: (match, episode, total), or None if there is no marker.
    """
    for pattern in EPISODE_RES:
        for match in pattern.finditer(text):
            episode = int(match.group(1))
            total = match.group(2)
            if episode < 1:
                continue
            if total is not None:
                if total.startswith("0") or int(total) < episode:
                    continue
                total = int(total)
            return match, episode, total
    return None


def clean_text(text: typing.Optional[str]) -> str:
    """Strips tags and entities and collapses whitespace."""
    if not text:
        return ""
    text = html.unescape(TAG_RE.sub(" ", text))
    return re.sub(r"\s+", " ", text).strip()


def parse_info(info: str) -> Entry:
    """
    Reads the markers the site puts in a programme's info line.

    `(R)`/`Reprise` marks a rerun, `(T)`/`Tekstet`/`Tekst-TV 777` subtitles,
    `(5:13)` or `Del 5 av 13` the episode and `Sesong 2` the season. The
    markers are removed and what is left is the description.

    Example:
        >>> parse_info("Britisk krimserie. Sesong 2. (3:6) (R)")["episode"]
        3
    """
    fields: Entry = {
        "rerun": False,
        "subtitled": False,
        "season": None,
        "episode": None,
        "episode_total": None,
    }
    text = clean_text(info)

    text, count = RERUN_RE.subn(" ", text)
    fields["rerun"] = count > 0
    text, count = SUBTITLED_RE.subn(" ", text)
    fields["subtitled"] = count > 0

    match = SEASON_RE.search(text)
    if match:
        fields["season"] = int(match.group(1))
        text = SEASON_RE.sub(" ", text, count=1)

    found = find_episode(text)
    if found:
        match, fields["episode"], fields["episode_total"] = found
        text = f"{text[:match.start()]} {text[match.end():]}"

    text = re.sub(r"\s+", " ", text).strip()
    fields["description"] = text if re.search(r"\w", text) else None
    return fields


class NorwayGrabber(Grabber):
    """tv_grab_no: listings for the Norwegian channels."""

    name = "tv_grab_no"
    description = "Norway"
    language = "nb"
    timezone = ZoneInfo("Europe/Oslo")
    base_url = "https://www.tvguiden.no"
    channel_domain = "tvguiden.no"

    def channels_url(self) -> str:
        return f"{self.base_url}/kanaler"

    def listing_url(self, channel: Channel, day: date) -> str:
        return f"{self.base_url}/kanal/{channel.id}?dato={day.isoformat()}"

    def parse_channels(self, page: str) -> typing.List[Channel]:
        channels = []
        seen = set()
        for match in OPTION_RE.finditer(page):
            channel_id = match.group("id").strip()
            # The first option is the "Velg kanal" placeholder.
            if not channel_id or channel_id in seen:
                continue
            seen.add(channel_id)
            channels.append(
                Channel(
                    id=channel_id,
                    name=clean_text(match.group("name")) or None,
                    broadcaster=clean_text(match.group("broadcaster")) or None,
                )
            )
        return channels

    def parse_listings(self, page: str) -> typing.List[Entry]:
        entries = []
        for match in PROGRAM_RE.finditer(page):
            entry = {
                "start": match.group("start"),
                "title": clean_text(match.group("title")),
            }
            entry.update(parse_info(match.group("info") or ""))
            entries.append(entry)
        return entries
