"""Turns clock times from listing pages into a clean, time-ordered schedule."""

import re
import typing
from dataclasses import asdict
from datetime import date, datetime, time, timedelta, tzinfo

import pandas as pd
from loguru import logger

from .models import Programme

CLOCK_RE = re.compile(r"(\d{1,2})\s*[:.hH]\s*(\d{2})")


def parse_clock(text: typing.Optional[str]) -> typing.Optional[time]:
    """
    Parses a clock time as printed by the listing sites.

    Accepts `18:45`, `18.45`, `18h45` and single-digit hours such as `6h05`.

    Returns:
        time: The parsed time, or None if the text holds no valid clock time.
    """
    if not text:
        return None
    match = CLOCK_RE.search(text)
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def assign_dates(
    day: date, clocks: typing.Sequence[time], tz: tzinfo
) -> typing.List[datetime]:
    """
    Attaches dates to the ordered clock times of one listing page.

    A page for `day` runs past midnight, so whenever a time is earlier than
    the one before it, that time and all later ones belong to the next day.

    Args:
        day (date): The day the page was requested for.
        clocks (list): Clock times in page order.
        tz (tzinfo): The time zone the site prints its times in.

    Returns:
        list: Aware datetimes, one per clock time.
    """
    result = []
    current = day
    previous = None
    for clock in clocks:
        if previous is not None and clock < previous:
            current += timedelta(days=1)
        result.append(datetime.combine(current, clock, tzinfo=tz))
        previous = clock
    return result


def stop_after(start: datetime, clock: time) -> datetime:
    """Returns the first occurrence of `clock` after `start`."""
    stop = datetime.combine(start.date(), clock, tzinfo=start.tzinfo)
    if stop <= start:
        stop = datetime.combine(
            start.date() + timedelta(days=1), clock, tzinfo=start.tzinfo
        )
    return stop


def finalize(
    programmes: typing.Iterable[Programme],
    window_start: datetime,
    window_stop: datetime,
) -> typing.List[Programme]:
    """
    Orders, deduplicates and trims the grabbed programmes.

    Adjacent day pages overlap after midnight, so a programme seen twice for
    the same channel and start is kept once. Missing stop times are taken
    from the next programme on the same channel.

    Args:
        programmes (iterable): Programmes from all channels and days.
        window_start (datetime): First instant to keep (inclusive).
        window_stop (datetime): Last instant to keep (exclusive).

    Returns:
        list: The programmes starting in the window, by channel and start.
    """
    records = [asdict(programme) for programme in programmes]
    if not records:
        return []

    frame = (
        pd.DataFrame(records, dtype=object)
        .sort_values(["channel", "start"], kind="stable")
        .drop_duplicates(["channel", "start"], keep="first")
        .reset_index(drop=True)
    )
    logger.debug(
        f"Dropped {len(records) - len(frame)} duplicate programmes while merging days"
    )

    next_start = frame.groupby("channel", sort=False)["start"].shift(-1)
    frame["stop"] = frame["stop"].where(frame["stop"].notna(), next_start)

    frame = frame.loc[
        frame["start"].between(window_start, window_stop, inclusive="left")
    ]
    logger.info(
        f"Keeping programmes between {window_start} and {window_stop}. Result has {len(frame)} rows."
    )

    return [
        Programme(**{key: None if pd.isna(value) else value for key, value in row.items()})
        for row in frame.to_dict("records")
    ]
