"""Reading, writing and interactively building a grabber configuration."""

# pylint: disable=C0116

import pathlib
import typing
from dataclasses import asdict

import click
import pydantic
import yaml
from loguru import logger
from pydantic import field_validator
from pydantic.dataclasses import dataclass

from .errors import ConfigError
from .models import Channel

CONFIG_DIR = pathlib.Path("~/.xmltv").expanduser()
CHOICES = ("yes", "no", "all", "none")


@dataclass
class GrabberConfig:
    """The channels a grabber should fetch listings for."""

    channels: typing.List[Channel]
    base_url: typing.Optional[str] = None

    @field_validator("channels")
    @classmethod
    def _unique_ids(cls, channels: typing.List[Channel]) -> typing.List[Channel]:
        seen = set()
        for channel in channels:
            if channel.id in seen:
                raise ValueError(f"channel '{channel.id}' is listed more than once")
            seen.add(channel.id)
        return channels

    @property
    def channel_ids(self) -> typing.Set[str]:
        return {channel.id for channel in self.channels}


def default_config_path(grabber_name: str) -> pathlib.Path:
    return CONFIG_DIR / f"{grabber_name}.yaml"


def load_config(path: pathlib.Path) -> GrabberConfig:
    """
    Loads and validates a configuration file.

    Args:
        path (Path): The YAML file to read.

    Returns:
        GrabberConfig: The validated configuration.

    Raises:
        ConfigError: If the file is missing, not YAML or not a valid config.
    """
    try:
        with path.open("rt", encoding="utf8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as err:
        raise ConfigError(
            f"Configuration file {path} does not exist, run with --configure first."
        ) from err
    except yaml.YAMLError as err:
        raise ConfigError(f"Configuration file {path} is not valid YAML: {err}") from err

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping.")
    try:
        config = GrabberConfig(**data)
    except (pydantic.ValidationError, TypeError) as err:
        raise ConfigError(f"Configuration file {path} is invalid: {err}") from err

    logger.debug(f"Loaded {len(config.channels)} channels from {path}")
    return config


def save_config(config: GrabberConfig, path: pathlib.Path) -> None:
    """Writes the configuration as YAML, leaving out unset fields."""
    data = asdict(config)
    data["channels"] = [
        {key: value for key, value in channel.items() if value is not None}
        for channel in data["channels"]
    ]
    if data["base_url"] is None:
        del data["base_url"]

    if not path.parent.exists():
        path.parent.mkdir(parents=True)
    with path.open("wt", encoding="utf8") as f:
        yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)
    logger.info(f"Saved {len(config.channels)} channels to {path}")


def prompt_channels(
    available: typing.Sequence[Channel],
    selected: typing.Container[str] = (),
    prompt: typing.Callable[..., str] = click.prompt,
) -> typing.List[Channel]:
    """
    Asks the user which of the available channels to keep.

    Answering `all` or `none` settles the current channel and every one after
    it without further questions.

    Args:
        available (list): Channels offered by the site, in site order.
        selected (container): Ids of the channels chosen previously.
        prompt (callable): Used to ask; defaults to `click.prompt`.

    Returns:
        list: The chosen channels, in site order.
    """
    chosen = []
    remaining = None
    for channel in available:
        if remaining is None:
            label = channel.display_name
            if channel.broadcaster:
                label += f" ({channel.broadcaster})"
            answer = prompt(
                f"Add channel {label}?",
                type=click.Choice(CHOICES),
                default="yes" if channel.id in selected else "no",
            )
            if answer in ("all", "none"):
                remaining = answer == "all"
                keep = remaining
            else:
                keep = answer == "yes"
        else:
            keep = remaining
        if keep:
            chosen.append(channel)
    return chosen
