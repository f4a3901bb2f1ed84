"""The country grabbers, by command name."""

from .base import Grabber
from .norway import NorwayGrabber
from .reunion import ReunionGrabber

GRABBERS = {grabber.name: grabber for grabber in (NorwayGrabber, ReunionGrabber)}

__all__ = ["GRABBERS", "Grabber", "NorwayGrabber", "ReunionGrabber"]
