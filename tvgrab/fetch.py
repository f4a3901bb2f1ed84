"""Contains functions for fetching listing pages"""

import typing

import requests
from loguru import logger

from . import __version__
from .errors import FetchError

TIMEOUT = 10
RETRIES = 3
USER_AGENT = f"tvgrab/{__version__} (+xmltv)"


def fetch_page(url: str, retries: int = RETRIES) -> typing.Optional[str]:
    """
    Fetches a web page and returns its decoded body.

    Args:
        url (str): The page to fetch.
        retries (int): How many times to try when the connection fails.

    Returns:
        str: The page content, or None if the page could not be fetched.
    """
    headers = {"User-Agent": USER_AGENT}
    for attempt in range(1, retries + 1):
        try:
            response = requests.get(url, headers=headers, timeout=TIMEOUT)
        except requests.RequestException as err:
            logger.debug(f"Attempt {attempt}/{retries} for {url} failed: {err}")
            continue
        logger.debug(f"GET {url} returned status code {response.status_code}")
        if response.status_code != 200:
            logger.warning(f"Could not fetch {url}: HTTP {response.status_code}")
            return None
        if not response.encoding:
            response.encoding = response.apparent_encoding
        return response.text

    logger.warning(f"Could not fetch {url} after {retries} attempts")
    return None


def fetch_required(url: str) -> str:
    """
    Fetches a page the grabber cannot continue without.

    Raises:
        FetchError: If the page could not be fetched.
    """
    page = fetch_page(url)
    if page is None:
        raise FetchError(f"Could not fetch {url}")
    return page
