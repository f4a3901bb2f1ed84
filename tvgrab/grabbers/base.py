"""The parts every grabber shares: fetching, date handling and the grab loop."""

# pylint: disable=C0116

import abc
import typing
from datetime import date, datetime, time, timedelta, tzinfo

import pydantic
from loguru import logger
from tqdm import tqdm

from .. import schedule
from ..config import GrabberConfig
from ..errors import GrabberError
from ..fetch import fetch_page, fetch_required
from ..models import Channel, Programme

Entry = typing.Dict[str, typing.Any]


class Grabber(abc.ABC):
    """
    A listings site for one country.

    Subclasses know the site's URLs and how to read its pages. `parse_listings`
    returns raw entries: dicts with the Programme fields, except that `start`
    and the optional `stop` are clock-time strings as printed on the page.
    """

    name: str
    description: str
    language: str
    timezone: tzinfo
    base_url: str
    channel_domain: str
    capabilities: typing.Tuple[str, ...] = ("baseline", "manualconfig")
    max_days: int = 7

    def __init__(self, base_url: typing.Optional[str] = None):
        if base_url:
            self.base_url = base_url.rstrip("/")

    @abc.abstractmethod
    def channels_url(self) -> str: ...

    @abc.abstractmethod
    def listing_url(self, channel: Channel, day: date) -> str: ...

    @abc.abstractmethod
    def parse_channels(self, page: str) -> typing.List[Channel]: ...

    @abc.abstractmethod
    def parse_listings(self, page: str) -> typing.List[Entry]: ...

    def xmltv_id(self, channel: Channel) -> str:
        return f"{channel.id}.{self.channel_domain}"

    def today(self) -> date:
        return datetime.now(self.timezone).date()

    def fetch_channels(self) -> typing.List[Channel]:
        """
        Fetches every channel the site offers.

        Raises:
            FetchError: If the channel list could not be fetched.
            GrabberError: If the page holds no channels, usually because the
                site layout has changed.
        """
        url = self.channels_url()
        logger.info(f"Fetching channel list from {url}")
        channels = self.parse_channels(fetch_required(url))
        if not channels:
            raise GrabberError(f"No channels found on {url}, has the site changed?")
        logger.debug(f"Found {len(channels)} channels")
        return channels

    def build_programmes(
        self, channel: Channel, day: date, entries: typing.Sequence[Entry]
    ) -> typing.List[Programme]:
        """Resolves the clock times of raw entries and validates them."""
        timed = []
        for entry in entries:
            clock = schedule.parse_clock(entry.get("start"))
            if clock is None:
                logger.warning(
                    f"Skipping '{entry.get('title')}' on {channel.id}: "
                    f"unreadable start time {entry.get('start')!r}"
                )
                continue
            timed.append((clock, entry))

        starts = schedule.assign_dates(
            day, [clock for clock, _ in timed], self.timezone
        )
        programmes = []
        for start, (_, entry) in zip(starts, timed):
            fields = {key: value for key, value in entry.items() if key != "start"}
            stop_clock = schedule.parse_clock(fields.pop("stop", None))
            if stop_clock is not None:
                fields["stop"] = schedule.stop_after(start, stop_clock)
            try:
                programmes.append(
                    Programme(channel=self.xmltv_id(channel), start=start, **fields)
                )
            except pydantic.ValidationError as err:
                logger.warning(f"Skipping invalid programme on {channel.id}: {err}")
        return programmes

    def grab_day(self, channel: Channel, day: date) -> typing.List[Programme]:
        """
        Grabs the listings of one channel for one day.

        A page that cannot be fetched is skipped with a warning.
        """
        url = self.listing_url(channel, day)
        html = fetch_page(url)
        if html is None:
            logger.warning(f"No listings for {channel.display_name} on {day}, skipping.")
            return []
        programmes = self.build_programmes(channel, day, self.parse_listings(html))
        if not programmes:
            logger.warning(f"Nothing found for {channel.display_name} on {day}.")
        return programmes

    def check_range(self, days: int, offset: int) -> int:
        """Returns how many of the requested days the site can deliver."""
        if offset >= self.max_days:
            logger.warning(f"The site only holds listings for {self.max_days} days.")
            return 0
        if offset + days > self.max_days:
            logger.warning(
                f"The site only holds listings for {self.max_days} days, "
                f"grabbing {self.max_days - offset} days."
            )
            return self.max_days - offset
        return days

    def grab(
        self,
        config: GrabberConfig,
        days: int,
        offset: int = 0,
        progress: bool = True,
    ) -> typing.List[Programme]:
        """
        Grabs the configured channels for `days` days starting `offset` days
        from today.

        Programmes starting between midnight and the first programme of a
        page are listed on the previous day's page, so that page is always
        fetched too.
        """
        days = self.check_range(days, offset)
        first = self.today() + timedelta(days=offset)
        window_start = datetime.combine(first, time(0), tzinfo=self.timezone)
        window_stop = datetime.combine(
            first + timedelta(days=days), time(0), tzinfo=self.timezone
        )
        if days == 0:
            return []

        fetch_days = [first + timedelta(days=n) for n in range(-1, days)]

        jobs = [(day, channel) for day in fetch_days for channel in config.channels]
        programmes = []
        for day, channel in tqdm(jobs, desc=f"Grabbing {self.name}", disable=not progress):
            programmes.extend(self.grab_day(channel, day))

        return schedule.finalize(programmes, window_start, window_stop)
