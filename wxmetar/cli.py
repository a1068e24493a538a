#!/usr/bin/env python3

import sys
import time
import json
import argparse
import logging
from typing import List, Optional

import requests

from wxmetar.config import MetarConfig
from wxmetar.exceptions import FetchError, InvalidDocument, NoMatchingElements
from wxmetar.models import MetarReport
from wxmetar.parser import MetarDocumentParser
from wxmetar.render import DecodedRenderer, TemplateRenderer
from wxmetar.sources import AviationWeatherSource

logger = logging.getLogger(__name__)

PROG = "metar"

EXIT_OK = 0
EXIT_NO_STATION = 4


def expand_escapes(template: str) -> str:
    """Expand the \\n and \\t sequences a shell leaves in a -f argument."""
    return template.replace("\\n", "\n").replace("\\t", "\t")


class Command:
    """Command-line interface for wxmetar."""

    def __init__(self, args, config: Optional[MetarConfig] = None, session: Optional[requests.Session] = None):
        """
        Initialize the command interface.

        Args:
            args: Command line arguments
            config: Base configuration, command line options override it
                (environment based by default)
            session: Optional requests.Session for the document source
        """
        self.args = args
        self.config = config or MetarConfig.from_env()
        self._apply_args()

        self.source = AviationWeatherSource.from_config(self.config, session=session)
        if self.args.force_refresh:
            self.source.set_force_refresh()
        if self.args.ignore_timestamps:
            self.source.set_never_refresh()

        self.decoded = DecodedRenderer(color=self.args.color)
        self.template = None
        if self.args.format is not None:
            self.template = expand_escapes(self.args.format)
        self.template_renderer = TemplateRenderer(color=self.args.color)

    def _apply_args(self):
        if self.args.url is not None:
            self.config.base_url = self.args.url
        if self.args.cache_dir is not None:
            self.config.cache_dir = self.args.cache_dir
        if self.args.hours is not None:
            self.config.hours = self.args.hours
        if self.args.entries is not None:
            self.config.max_entries = self.args.entries
        if self.args.delay is not None:
            self.config.delay_seconds = self.args.delay

    def render(self, report: MetarReport) -> str:
        """Format one report according to the selected output mode."""
        if self.args.json:
            return json.dumps(report.to_dict())
        if self.args.decoded:
            return self.decoded.render(report)
        if self.template is not None:
            return self.template_renderer.render(self.template, report)
        return report.raw_text

    def run_station(self, station: str) -> List[str]:
        """
        Retrieve, decode and render the reports of one station.

        Returns:
            The lines to print, either rendered reports or a single
            "No weather information" message
        """
        try:
            data = self.source.get_document(station)
        except FetchError as e:
            return [f"No weather information for {station}: {e}."]

        try:
            reports = MetarDocumentParser.parse_document(data, max_records=self.config.max_entries)
        except InvalidDocument as e:
            logger.info(f"{station}: {e}")
            return [f"No weather information for {station}: invalid XML data."]
        except NoMatchingElements:
            return [f"No weather information for {station} is available at this time."]

        logger.info(f"Decoded {len(reports)} reports for {station}")
        return [self.render(report) for report in reports]

    def run(self) -> int:
        """Run the command, returns the process exit status."""
        if self.args.purge:
            self.source.purge()

        stations = [station.strip().upper() for station in self.args.stations if station.strip()]
        if not stations:
            if self.args.purge:
                print(f"{PROG}: Cache purged.", file=sys.stderr)
                return EXIT_OK
            print(f"{PROG}: error: Please specify a weather station by 4-digit ICAO code.", file=sys.stderr)
            return EXIT_NO_STATION

        for i, station in enumerate(stations):
            for line in self.run_station(station):
                print(line)
            if i + 1 < len(stations) and self.config.delay_seconds > 0:
                time.sleep(self.config.delay_seconds)

        return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description='Retrieve and decode METAR/SPECI weather reports from aviationweather.gov',
    )
    parser.add_argument('stations', help='4-letter ICAO weather station codes', nargs='*')
    parser.add_argument('-G', '--color', help='Enable color output', action='store_true')
    parser.add_argument('-d', '--decoded', help='Decode the METAR text', action='store_true')
    parser.add_argument('-e', '--entries', help='Display no more than this number of entries per station', type=int)
    parser.add_argument(
        '-f', '--format',
        help='Output each report using this template, e.g. "{station_id}: {temp_c}C\\n". '
             f'Placeholders: {" ".join(TemplateRenderer.placeholders())}',
    )
    parser.add_argument('-H', '--hours', help='Number of hours in the past to retrieve', type=int)
    parser.add_argument('-n', '--force-refresh', help='Force a new download of the reports', action='store_true')
    parser.add_argument('-p', '--cache-dir', help='Directory holding the metar-*.xml cache files')
    parser.add_argument('-t', '--ignore-timestamps', help='Use cached reports regardless of their age', action='store_true')
    parser.add_argument('-u', '--url', help='Base URL of the METAR service')
    parser.add_argument('-x', '--purge', help='Purge the cache before retrieval', action='store_true')
    parser.add_argument('--delay', help='Seconds to wait between stations', type=float)
    parser.add_argument('--json', help='Output one JSON object per report', action='store_true')
    parser.add_argument('-v', '--verbose', help='Verbose output', action='store_true')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    cmd = Command(args)
    return cmd.run()


if __name__ == '__main__':
    sys.exit(main())
