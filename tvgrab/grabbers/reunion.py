"""Grabber for TV listings on Réunion Island, read by walking the page DOM."""

# pylint: disable=C0116

import re
import typing
from datetime import date
from zoneinfo import ZoneInfo

from bs4 import BeautifulSoup

from ..models import Channel
from .base import Entry, Grabber

SEASON_RE = re.compile(r"\bsaison\s+(\d+)", re.I)
EPISODE_RE = re.compile(r"\b[ée]pisode\s+(\d+)(?:\s*/\s*(\d+))?", re.I)


def search_html(soup, tag, attributes=None, all=True):  # pylint: disable=W0622
    """
    Searches the given soup for the given tag and attributes
    """
    if all:
        return soup.find_all(tag, attrs=attributes)
    return soup.find(tag, attrs=attributes)


def text_of(element) -> typing.Optional[str]:
    """The whitespace-normalised text of an element, None if absent or empty."""
    if element is None:
        return None
    text = " ".join(element.get_text(" ", strip=True).split())
    return text or None


def parse_flags(flags: typing.Iterable[str]) -> Entry:
    """
    Reads the labels listed under a programme.

    `Rediffusion` marks a rerun, `Sous-titré`/`ST` subtitles and `Inédit` a
    first showing. `Saison 2` and `Épisode 5/26` give the episode number.
    Unknown labels are ignored.
    """
    fields: Entry = {
        "rerun": False,
        "subtitled": False,
        "new": False,
        "season": None,
        "episode": None,
        "episode_total": None,
    }
    for flag in flags:
        label = flag.strip().lower()
        if label.startswith("rediffusion"):
            fields["rerun"] = True
        elif label.startswith("sous-titr") or label == "st":
            fields["subtitled"] = True
        elif label.startswith(("inédit", "inedit")):
            fields["new"] = True
        match = SEASON_RE.search(flag)
        if match:
            fields["season"] = int(match.group(1))
        match = EPISODE_RE.search(flag)
        if match:
            fields["episode"] = int(match.group(1))
            if match.group(2):
                fields["episode_total"] = int(match.group(2))
    return fields


class ReunionGrabber(Grabber):
    """tv_grab_re: listings for the channels broadcast on Réunion Island."""

    name = "tv_grab_re"
    description = "Reunion Island"
    language = "fr"
    timezone = ZoneInfo("Indian/Reunion")
    base_url = "https://www.programme-tv.re"
    channel_domain = "programme-tv.re"

    def channels_url(self) -> str:
        return f"{self.base_url}/chaines"

    def listing_url(self, channel: Channel, day: date) -> str:
        return f"{self.base_url}/chaine/{channel.id}/{day:%Y%m%d}"

    def parse_channels(self, page: str) -> typing.List[Channel]:
        soup = BeautifulSoup(page, "html.parser")
        channels = []
        seen = set()
        for item in search_html(soup, "li", {"class": "chaine"}):
            channel_id = (item.get("data-id") or "").strip()
            if not channel_id or channel_id in seen:
                continue
            seen.add(channel_id)
            channels.append(
                Channel(
                    id=channel_id,
                    name=text_of(search_html(item, "span", {"class": "nom"}, all=False)),
                    broadcaster=text_of(
                        search_html(item, "span", {"class": "groupe"}, all=False)
                    ),
                )
            )
        return channels

    def parse_listings(self, page: str) -> typing.List[Entry]:
        soup = BeautifulSoup(page, "html.parser")
        entries = []
        for emission in search_html(soup, "div", {"class": "emission"}):
            # The time is either "06h30" or a range such as "06h30 - 07h00".
            start, _, stop = (
                text_of(search_html(emission, None, {"class": "horaire"}, all=False))
                or ""
            ).partition("-")
            end = text_of(search_html(emission, None, {"class": "fin"}, all=False))

            infos = search_html(emission, "ul", {"class": "infos"}, all=False)
            flags = [] if infos is None else [li.get_text(strip=True) for li in infos.find_all("li")]

            entry = {
                "start": start.strip(),
                "stop": end or stop.strip() or None,
                "title": text_of(search_html(emission, None, {"class": "titre"}, all=False))
                or "",
                "sub_title": text_of(
                    search_html(emission, None, {"class": "sous-titre"}, all=False)
                ),
                "description": text_of(
                    search_html(emission, None, {"class": "resume"}, all=False)
                ),
                "category": text_of(
                    search_html(emission, None, {"class": "genre"}, all=False)
                ),
            }
            entry.update(parse_flags(flags))
            entries.append(entry)
        return entries
