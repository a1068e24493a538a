"""Decoder for the aviationweather.gov ADDS METAR XML document."""

import re
import logging
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Optional, List, Union

from dateutil import tz

from wxmetar.exceptions import InvalidDocument, NoMatchingElements, FieldCoercionAnomaly
from wxmetar.models import (
    MetarReport,
    ReportType,
    FlightCategory,
    SkyCover,
    SkyCondition,
    QualityFlag,
    QUALITY_FLAG_FIELDS,
    MAX_SKY_CONDITIONS,
)

logger = logging.getLogger(__name__)

OBSERVATION_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_FLOAT_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"\s*[+-]?\d+")

# XML element name -> MetarReport attribute
_FLOAT_FIELDS = {
    'latitude': 'latitude',
    'longitude': 'longitude',
    'elevation_m': 'elevation_m',
    'temp_c': 'temp_c',
    'dewpoint_c': 'dewpoint_c',
    'visibility_statute_mi': 'visibility_statute_mi',
    'altim_in_hg': 'altim_in_hg',
    'sea_level_pressure_mb': 'sea_level_pressure_mb',
    'three_hr_pressure_tendency_mb': 'three_hr_pressure_tendency_mb',
    'maxT_c': 'max_t_c',
    'minT_c': 'min_t_c',
    'maxT24hr_c': 'max_t24hr_c',
    'minT24hr_c': 'min_t24hr_c',
    'precip_in': 'precip_in',
    'pcp3hr_in': 'pcp3hr_in',
    'pcp6hr_in': 'pcp6hr_in',
    'pcp24hr_in': 'pcp24hr_in',
    'snow_in': 'snow_in',
}

_INT_FIELDS = {
    'wind_dir_degrees': 'wind_dir_degrees',
    'wind_speed_kt': 'wind_speed_kt',
    'wind_gust_kt': 'wind_gust_kt',
    'vert_vis_ft': 'vert_vis_ft',
}

_QUALITY_FLAGS = {element: flag for flag, element, _ in QUALITY_FLAG_FIELDS}


def parse_float(text: Optional[str], field: str = "value") -> float:
    """
    Parse the longest leading numeric prefix of text as a float.

    "12.5abc" gives 12.5, like C atof(), but text without any numeric
    prefix raises instead of silently becoming 0.

    Raises:
        FieldCoercionAnomaly: if text has no numeric prefix
    """
    match = _FLOAT_PREFIX.match(text or "")
    if not match:
        raise FieldCoercionAnomaly(field, text)
    try:
        return float(match.group(0))
    except ValueError as e:
        raise FieldCoercionAnomaly(field, text) from e


def parse_int(text: Optional[str], field: str = "value") -> int:
    """
    Parse the longest leading integer prefix of text.

    Raises:
        FieldCoercionAnomaly: if text has no integer prefix or the prefix
            cannot be converted (e.g. too many digits)
    """
    match = _INT_PREFIX.match(text or "")
    if not match:
        raise FieldCoercionAnomaly(field, text)
    try:
        return int(match.group(0))
    except ValueError as e:
        raise FieldCoercionAnomaly(field, text) from e


class MetarDocumentParser:
    """
    Decode an ADDS METAR XML document into MetarReport objects.

    The document looks like:

        <response>
          <data num_results="1">
            <METAR>
              <raw_text>KPDX 121853Z 27008KT 10SM FEW050 15/10 A3012</raw_text>
              <station_id>KPDX</station_id>
              <observation_time>2024-05-12T18:53:00Z</observation_time>
              ...
              <sky_condition sky_cover="FEW" cloud_base_ft_agl="5000"/>
              <flight_category>VFR</flight_category>
            </METAR>
          </data>
        </response>

    Unknown child elements are ignored. A field whose text cannot be
    converted is left unknown (None) and decoding carries on.

    Example:
        reports = MetarDocumentParser.parse_document(xml_bytes, max_records=10)
    """

    @classmethod
    def parse_document(
        cls,
        data: Union[bytes, str],
        max_records: Optional[int] = None,
    ) -> List[MetarReport]:
        """
        Decode all METAR elements of a document, in document order.

        Args:
            data: Raw XML document
            max_records: Maximum number of reports to decode (None for all)

        Returns:
            List of MetarReport

        Raises:
            InvalidDocument: if the data is not an ADDS response document
            NoMatchingElements: if the document holds no METAR element
        """
        elements = cls._find_metar_elements(data)
        if not elements:
            raise NoMatchingElements("No METAR elements in document")

        if max_records is not None:
            elements = elements[:max(max_records, 0)]

        return [cls.parse_metar_element(element) for element in elements]

    @classmethod
    def count_metars(cls, data: Union[bytes, str]) -> int:
        """Number of METAR elements in a document, 0 if it is invalid."""
        try:
            return len(cls._find_metar_elements(data))
        except InvalidDocument:
            return 0

    @classmethod
    def _find_metar_elements(cls, data: Union[bytes, str]) -> List[ET.Element]:
        if not data:
            raise InvalidDocument("Empty document")
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise InvalidDocument(f"Malformed XML: {e}") from e

        if root.tag != 'response':
            raise InvalidDocument(f"Unexpected root element <{root.tag}>")

        return root.findall('./data/METAR')

    @classmethod
    def parse_metar_element(cls, element: ET.Element) -> MetarReport:
        """
        Decode one <METAR> element.

        Args:
            element: The METAR element

        Returns:
            A fully populated MetarReport
        """
        report = MetarReport()

        for child in element:
            name = child.tag
            text = child.text

            if name in _FLOAT_FIELDS:
                setattr(report, _FLOAT_FIELDS[name], cls._coerce(parse_float, name, text))
            elif name in _INT_FIELDS:
                setattr(report, _INT_FIELDS[name], cls._coerce(parse_int, name, text))
            elif name == 'sky_condition':
                if len(report.sky_conditions) < MAX_SKY_CONDITIONS:
                    layer = cls._parse_sky_condition(child)
                    if layer is not None:
                        report.sky_conditions.append(layer)
            elif name == 'raw_text':
                report.raw_text = text or ""
            elif name == 'station_id':
                report.station_id = (text or "").strip()[:4]
            elif name == 'observation_time':
                report.observation_time = cls._parse_observation_time(text)
            elif name == 'quality_control_flags':
                report.quality_flags = cls._parse_quality_flags(child)
            elif name == 'wx_string':
                report.wx_string = text or ""
            elif name == 'flight_category':
                report.flight_category = FlightCategory.from_text(text)
            elif name == 'metar_type':
                report.metar_type = ReportType.from_text(text)

        return report

    # --- Field helpers ---

    @staticmethod
    def _coerce(converter, name: str, text: Optional[str]):
        try:
            return converter(text, name)
        except FieldCoercionAnomaly as e:
            logger.debug("Leaving field unknown: %s", e)
            return None

    @staticmethod
    def _parse_observation_time(text: Optional[str]) -> Optional[datetime]:
        """Parse the fixed YYYY-MM-DDTHH:MM:SSZ format, None on failure."""
        if not text:
            return None
        try:
            when = datetime.strptime(text.strip(), OBSERVATION_TIME_FORMAT)
        except ValueError:
            logger.debug("Invalid observation_time %r", text)
            return None
        return when.replace(tzinfo=tz.UTC)

    @staticmethod
    def _parse_quality_flags(element: ET.Element) -> QualityFlag:
        """A flag is set only when its sub-element text is 'true' (any case)."""
        flags = QualityFlag.NONE
        for child in element:
            if (child.text or "").strip().lower() != "true":
                continue
            flag = _QUALITY_FLAGS.get(child.tag)
            if flag is not None:
                flags |= flag
        return flags

    @classmethod
    def _parse_sky_condition(cls, element: ET.Element) -> Optional[SkyCondition]:
        """
        Build a layer from <sky_condition sky_cover="..." cloud_base_ft_agl="..."/>.

        Both attributes are read before the layer is built, whatever their
        order in the source. Elements without sky_cover are skipped.
        """
        cover = element.get('sky_cover')
        if cover is None:
            return None

        base = element.get('cloud_base_ft_agl')
        base_ft = None
        if base is not None:
            base_ft = cls._coerce(parse_int, 'cloud_base_ft_agl', base)

        return SkyCondition(cover=SkyCover.from_code(cover.strip()), cloud_base_ft_agl=base_ft)
