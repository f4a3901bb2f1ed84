"""Command line interface for the TV grabbers."""

# pylint: disable=C0116,R0913,R0917

import pathlib
import sys
import typing

import click
from loguru import logger

from . import __version__
from .config import (
    GrabberConfig,
    default_config_path,
    load_config,
    prompt_channels,
    save_config,
)
from .errors import ConfigError, GrabberError
from .grabbers import Grabber, NorwayGrabber, ReunionGrabber
from .models import Channel, Programme
from .xmltv import XMLTVWriter


def setup_logging(quiet: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="WARNING" if quiet else "INFO")


def _echo_and_exit(text: str):
    def callback(ctx, _param, value):
        if not value or ctx.resilient_parsing:
            return
        click.echo(text)
        ctx.exit()

    return callback


def grabber_command(grabber_class: typing.Type[Grabber]) -> click.Command:
    """Builds the XMLTV-style command line for one grabber."""

    @click.command(
        name=grabber_class.name,
        help=f"Grab TV listings for {grabber_class.description} in XMLTV format.",
    )
    @click.option(
        "--configure",
        is_flag=True,
        help="Select channels and save the configuration.",
    )
    @click.option(
        "--config-file",
        type=click.Path(dir_okay=False, resolve_path=True, path_type=pathlib.Path),
        help="Configuration file in YAML format",
    )
    @click.option(
        "--days",
        type=click.IntRange(min=1),
        default=grabber_class.max_days,
        show_default=True,
        help="Number of days to grab",
    )
    @click.option(
        "--offset",
        type=click.IntRange(min=0),
        default=0,
        help="Day to start grabbing on, 0 is today",
    )
    @click.option(
        "--output",
        type=click.File(mode="wt", encoding="utf8"),
        default="-",
        help="Write the XMLTV document to this file.",
    )
    @click.option("--quiet", is_flag=True, help="Only log warnings and errors.")
    @click.option(
        "--list-channels",
        is_flag=True,
        help="Write all available channels as XMLTV.",
    )
    @click.option(
        "--capabilities",
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_echo_and_exit("\n".join(grabber_class.capabilities)),
        help="Print the supported XMLTV capabilities.",
    )
    @click.option(
        "--description",
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_echo_and_exit(grabber_class.description),
        help="Print a short description of the grabber.",
    )
    @click.version_option(__version__, prog_name=grabber_class.name)
    def cli(configure, config_file, days, offset, output, quiet, list_channels):
        setup_logging(quiet)
        config_file = config_file or default_config_path(grabber_class.name)
        try:
            main(
                grabber_class,
                config_file,
                output,
                configure=configure,
                list_channels=list_channels,
                days=days,
                offset=offset,
                quiet=quiet,
            )
        except GrabberError as err:
            raise click.ClickException(str(err)) from err

    return cli


@logger.catch(exclude=(GrabberError, click.ClickException, click.Abort), reraise=True)
def main(
    grabber_class: typing.Type[Grabber],
    config_file: pathlib.Path,
    output: typing.TextIO,
    configure: bool = False,
    list_channels: bool = False,
    days: int = 1,
    offset: int = 0,
    quiet: bool = False,
):
    existing = None
    if list_channels or configure:
        try:
            existing = load_config(config_file) if config_file.exists() else None
        except ConfigError as err:
            logger.warning(f"Ignoring the existing configuration: {err}")
    else:
        existing = load_config(config_file)
    grabber = grabber_class(base_url=existing.base_url if existing else None)

    if list_channels:
        channels = grabber.fetch_channels()
        write_listings(grabber, channels, [], output)
    elif configure:
        run_configure(grabber, existing, config_file)
    else:
        logger.info(
            f"Grabbing {days} days from offset {offset} for {len(existing.channels)} channels"
        )
        programmes = grabber.grab(existing, days, offset, progress=not quiet)
        write_listings(grabber, existing.channels, programmes, output)

    return 0


def run_configure(
    grabber: Grabber,
    existing: typing.Optional[GrabberConfig],
    config_file: pathlib.Path,
) -> GrabberConfig:
    available = grabber.fetch_channels()
    selected = existing.channel_ids if existing else set()
    channels = prompt_channels(available, selected)
    if not channels:
        logger.warning("No channels selected, the grabber will produce no listings.")
    config = GrabberConfig(
        channels=channels, base_url=existing.base_url if existing else None
    )
    save_config(config, config_file)
    return config


def write_listings(
    grabber: Grabber,
    channels: typing.Sequence[Channel],
    programmes: typing.Sequence[Programme],
    output: typing.TextIO,
) -> None:
    with XMLTVWriter(
        output,
        f"{grabber.name}/{__version__}",
        source_url=grabber.base_url,
        lang=grabber.language,
    ) as writer:
        for channel in channels:
            writer.write_channel(grabber.xmltv_id(channel), channel.display_name)
        for programme in programmes:
            writer.write_programme(programme)
    logger.info(f"Wrote {len(channels)} channels and {len(programmes)} programmes")


tv_grab_no = grabber_command(NorwayGrabber)
tv_grab_re = grabber_command(ReunionGrabber)
