"""Exceptions raised by the grabbers."""


class GrabberError(Exception):
    """Base class for errors that should stop a grabber run."""


class ConfigError(GrabberError):
    """The configuration file is missing or invalid."""


class FetchError(GrabberError):
    """A page the grabber cannot do without could not be fetched."""
