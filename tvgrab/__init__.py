"""This is tvgrab.

With this small tool you can grab TV listings for Norway and Réunion Island
and write them as XMLTV for your favourite TV guide software.

Usage
=====

Each country has its own grabber command. Both follow the XMLTV grabber
conventions. First select the channels you are interested in:

$ tv_grab_no --configure

Then fetch the listings for the next three days into a file:

$ tv_grab_no --days 3 --output listings.xml

$ tv_grab_re --help
Usage: tv_grab_re [OPTIONS]

Options:
  --configure                   Select channels and save the configuration.
  --config-file PATH            Configuration file in YAML format
  --days INTEGER RANGE          Number of days to grab  [default: 7; x>=1]
  --offset INTEGER RANGE        Day to start grabbing on, 0 is today  [x>=0]
  --output FILENAME             Write the XMLTV document to this file.
  --quiet                       Only log warnings and errors.
  --list-channels               Write all available channels as XMLTV.
  --capabilities                Print the supported XMLTV capabilities.
  --description                 Print a short description of the grabber.
  --version                     Show the version and exit.
  --help                        Show this message and exit.

The configuration file should look like this:

```yaml
channels:
  - id: nrk1
    name: NRK1
    broadcaster: NRK
  - id: tv2
    name: TV 2
```

Only `id` is required. `--configure` writes this file for you, and you may
add a `base_url` key to point a grabber at a mirror of the listings site.

"""

__version__ = "0.1.0"
