"""Records shared by the grabbers and the XMLTV writer."""

# pylint: disable=C0116

import typing
from datetime import datetime

from pydantic import field_validator
from pydantic.dataclasses import dataclass


@dataclass
class Channel:
    """A channel as listed by the site and stored in the configuration."""

    id: str
    name: typing.Optional[str] = None
    broadcaster: typing.Optional[str] = None

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("channel id must not be empty")
        return value

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass
class Programme:
    """A single programme extracted from a listing page."""

    channel: str
    start: datetime
    title: str
    stop: typing.Optional[datetime] = None
    description: typing.Optional[str] = None
    sub_title: typing.Optional[str] = None
    category: typing.Optional[str] = None
    season: typing.Optional[int] = None
    episode: typing.Optional[int] = None
    episode_total: typing.Optional[int] = None
    subtitled: bool = False
    rerun: bool = False
    new: bool = False

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("programme title must not be empty")
        return value

    @property
    def xmltv_ns(self) -> typing.Optional[str]:
        """Episode number in the zero-based xmltv_ns system, e.g. `1.4/13.`."""
        if self.season is None and self.episode is None:
            return None
        season = "" if self.season is None else str(self.season - 1)
        episode = "" if self.episode is None else str(self.episode - 1)
        if self.episode is not None and self.episode_total:
            episode += f"/{self.episode_total}"
        return f"{season}.{episode}."
