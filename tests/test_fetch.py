import pytest
import requests
from unittest.mock import patch, MagicMock

from tvgrab.errors import FetchError
from tvgrab.fetch import RETRIES, USER_AGENT, fetch_page, fetch_required

URL = "https://www.tvguiden.no/kanal/nrk1?dato=2024-03-01"


def test_fetch_page_success():
    with patch("requests.get") as mock_get:
        mock_get.return_value.status_code = 200
        mock_get.return_value.encoding = "utf-8"
        mock_get.return_value.text = "<html></html>"
        page = fetch_page(URL)
        assert page == "<html></html>"
        assert mock_get.call_args.kwargs["headers"]["User-Agent"] == USER_AGENT
        assert mock_get.call_args.kwargs["timeout"] > 0


def test_fetch_page_http_error():
    with patch("requests.get") as mock_get:
        mock_get.return_value.status_code = 404
        assert fetch_page(URL) is None
        assert mock_get.call_count == 1


def test_fetch_page_retries_after_connection_error():
    ok = MagicMock(status_code=200, encoding="utf-8", text="ok")
    with patch("requests.get", side_effect=[requests.ConnectionError("boom"), ok]) as mock_get:
        assert fetch_page(URL) == "ok"
        assert mock_get.call_count == 2


def test_fetch_page_gives_up():
    with patch("requests.get", side_effect=requests.Timeout("slow")) as mock_get:
        assert fetch_page(URL) is None
        assert mock_get.call_count == RETRIES


def test_fetch_page_guesses_missing_encoding():
    with patch("requests.get") as mock_get:
        response = mock_get.return_value
        response.status_code = 200
        response.encoding = None
        response.apparent_encoding = "ISO-8859-1"
        response.text = "Sørlandet"
        fetch_page(URL)
        assert response.encoding == "ISO-8859-1"


def test_fetch_required_returns_page():
    with patch("tvgrab.fetch.fetch_page", return_value="<html></html>"):
        assert fetch_required(URL) == "<html></html>"


def test_fetch_required_raises():
    with patch("tvgrab.fetch.fetch_page", return_value=None):
        with pytest.raises(FetchError):
            fetch_required(URL)
