"""METAR report data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, Flag
from typing import Optional, List, Tuple


class FlightCategory(Enum):
    """
    FAA flight category as published with the report.

    The category is never recomputed locally; anything the source sends
    that is not one of the four known codes becomes UNKNOWN.
    """

    VFR = "VFR"
    MVFR = "MVFR"
    IFR = "IFR"
    LIFR = "LIFR"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_text(cls, text: Optional[str]) -> 'FlightCategory':
        if text in ("VFR", "MVFR", "IFR", "LIFR"):
            return cls(text)
        return cls.UNKNOWN


class ReportType(Enum):
    """Type of weather report."""

    METAR = "METAR"
    SPECI = "SPECI"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_text(cls, text: Optional[str]) -> 'ReportType':
        if text in ("METAR", "SPECI"):
            return cls(text)
        return cls.UNKNOWN


class SkyCover(Enum):
    """
    Sky cover code of one sky condition layer.

    SKC is clear sky, CLR is clear below 12,000 ft (automated stations),
    OVX is sky obscured.
    """

    SKC = "SKC"
    CLR = "CLR"
    CAVOK = "CAVOK"
    FEW = "FEW"
    SCT = "SCT"
    BKN = "BKN"
    OVC = "OVC"
    OVX = "OVX"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_code(cls, code: Optional[str]) -> 'SkyCover':
        try:
            cover = cls(code)
        except ValueError:
            return cls.UNKNOWN
        return cover

    @property
    def code(self) -> str:
        """Code as printed in templates, '???' when unknown."""
        if self is SkyCover.UNKNOWN:
            return "???"
        return self.value


class QualityFlag(Flag):
    """Quality control flags reported by the station."""

    NONE = 0
    CORRECTED = 0x1
    AUTO = 0x2
    AUTO_STATION = 0x4
    MAINTENANCE = 0x8
    NO_SIGNAL = 0x10
    LIGHTNING_OFF = 0x20
    FREEZING_OFF = 0x40
    WEATHER_OFF = 0x80


# Canonical order, with the XML element name and the template token
QUALITY_FLAG_FIELDS: Tuple[Tuple[QualityFlag, str, str], ...] = (
    (QualityFlag.CORRECTED, "corrected", "COR"),
    (QualityFlag.AUTO, "auto", "AUTO"),
    (QualityFlag.AUTO_STATION, "auto_station", "AUTOST"),
    (QualityFlag.MAINTENANCE, "maintenance_indicator", "MAINT"),
    (QualityFlag.NO_SIGNAL, "no_signal", "NOSIG"),
    (QualityFlag.LIGHTNING_OFF, "lightning_sensor_off", "NOLTN"),
    (QualityFlag.FREEZING_OFF, "freezing_rain_sensor_off", "NOFRZ"),
    (QualityFlag.WEATHER_OFF, "present_weather_sensor_off", "INOP"),
)

MAX_SKY_CONDITIONS = 4


@dataclass(frozen=True)
class SkyCondition:
    """
    One sky condition layer.

    Attributes:
        cover: Sky cover code
        cloud_base_ft_agl: Cloud base in feet above ground level, None if
            not applicable (clear sky, CAVOK)
    """

    cover: SkyCover = SkyCover.UNKNOWN
    cloud_base_ft_agl: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'cover': self.cover.value,
            'cloud_base_ft_agl': self.cloud_base_ft_agl,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SkyCondition':
        return cls(
            cover=SkyCover.from_code(data.get('cover')),
            cloud_base_ft_agl=data.get('cloud_base_ft_agl'),
        )


@dataclass
class MetarReport:
    """
    One decoded METAR or SPECI observation.

    Every measurement is Optional: None means the source did not report it,
    which is never the same as a reported zero.

    Attributes:
        station_id: 4 letter ICAO station code
        observation_time: Observation time (UTC, timezone aware)
        metar_type: METAR, SPECI or UNKNOWN
        raw_text: Report text as issued
        latitude: Station latitude in decimal degrees
        longitude: Station longitude in decimal degrees
        elevation_m: Station elevation in meters
        temp_c: Temperature in Celsius
        dewpoint_c: Dewpoint in Celsius
        wind_dir_degrees: Wind direction, 0 for variable (or calm when the
            speed is 0)
        wind_speed_kt: Wind speed in knots
        wind_gust_kt: Gust speed in knots
        visibility_statute_mi: Horizontal visibility in statute miles
        altim_in_hg: Altimeter setting in inches of mercury
        sea_level_pressure_mb: Sea level pressure in millibars
        three_hr_pressure_tendency_mb: Pressure change over 3 hours
        wx_string: Present weather, empty when none
        sky_conditions: Up to four layers, in reported order
        quality_flags: Station quality control flags
        flight_category: Published flight category
    """

    # Identity
    station_id: str = ""
    observation_time: Optional[datetime] = None
    metar_type: ReportType = ReportType.UNKNOWN
    raw_text: str = ""

    # Location
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    elevation_m: Optional[float] = None

    # Atmospherics
    temp_c: Optional[float] = None
    dewpoint_c: Optional[float] = None
    wind_dir_degrees: Optional[int] = None
    wind_speed_kt: Optional[int] = None
    wind_gust_kt: Optional[int] = None
    visibility_statute_mi: Optional[float] = None
    altim_in_hg: Optional[float] = None
    sea_level_pressure_mb: Optional[float] = None
    three_hr_pressure_tendency_mb: Optional[float] = None

    # Extremes & precipitation
    max_t_c: Optional[float] = None
    min_t_c: Optional[float] = None
    max_t24hr_c: Optional[float] = None
    min_t24hr_c: Optional[float] = None
    precip_in: Optional[float] = None
    pcp3hr_in: Optional[float] = None
    pcp6hr_in: Optional[float] = None
    pcp24hr_in: Optional[float] = None
    snow_in: Optional[float] = None
    vert_vis_ft: Optional[int] = None

    # Weather, sky & quality
    wx_string: str = ""
    sky_conditions: List[SkyCondition] = field(default_factory=list)
    quality_flags: QualityFlag = QualityFlag.NONE
    flight_category: FlightCategory = FlightCategory.UNKNOWN

    def has_flag(self, flag: QualityFlag) -> bool:
        return (self.quality_flags & flag) == flag

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        return {
            'station_id': self.station_id,
            'observation_time': self.observation_time.isoformat() if self.observation_time else None,
            'metar_type': self.metar_type.value,
            'raw_text': self.raw_text,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'elevation_m': self.elevation_m,
            'temp_c': self.temp_c,
            'dewpoint_c': self.dewpoint_c,
            'wind_dir_degrees': self.wind_dir_degrees,
            'wind_speed_kt': self.wind_speed_kt,
            'wind_gust_kt': self.wind_gust_kt,
            'visibility_statute_mi': self.visibility_statute_mi,
            'altim_in_hg': self.altim_in_hg,
            'sea_level_pressure_mb': self.sea_level_pressure_mb,
            'three_hr_pressure_tendency_mb': self.three_hr_pressure_tendency_mb,
            'max_t_c': self.max_t_c,
            'min_t_c': self.min_t_c,
            'max_t24hr_c': self.max_t24hr_c,
            'min_t24hr_c': self.min_t24hr_c,
            'precip_in': self.precip_in,
            'pcp3hr_in': self.pcp3hr_in,
            'pcp6hr_in': self.pcp6hr_in,
            'pcp24hr_in': self.pcp24hr_in,
            'snow_in': self.snow_in,
            'vert_vis_ft': self.vert_vis_ft,
            'wx_string': self.wx_string,
            'sky_conditions': [s.to_dict() for s in self.sky_conditions],
            'quality_flags': [token for flag, _, token in QUALITY_FLAG_FIELDS if self.has_flag(flag)],
            'flight_category': self.flight_category.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'MetarReport':
        """Create MetarReport from dictionary."""
        observation_time = None
        if data.get('observation_time'):
            observation_time = datetime.fromisoformat(data['observation_time'])

        quality_flags = QualityFlag.NONE
        tokens = set(data.get('quality_flags') or [])
        for flag, _, token in QUALITY_FLAG_FIELDS:
            if token in tokens:
                quality_flags |= flag

        sky_conditions = [
            SkyCondition.from_dict(s) for s in data.get('sky_conditions', [])
        ][:MAX_SKY_CONDITIONS]

        return cls(
            station_id=data.get('station_id', ''),
            observation_time=observation_time,
            metar_type=ReportType.from_text(data.get('metar_type')),
            raw_text=data.get('raw_text', ''),
            latitude=data.get('latitude'),
            longitude=data.get('longitude'),
            elevation_m=data.get('elevation_m'),
            temp_c=data.get('temp_c'),
            dewpoint_c=data.get('dewpoint_c'),
            wind_dir_degrees=data.get('wind_dir_degrees'),
            wind_speed_kt=data.get('wind_speed_kt'),
            wind_gust_kt=data.get('wind_gust_kt'),
            visibility_statute_mi=data.get('visibility_statute_mi'),
            altim_in_hg=data.get('altim_in_hg'),
            sea_level_pressure_mb=data.get('sea_level_pressure_mb'),
            three_hr_pressure_tendency_mb=data.get('three_hr_pressure_tendency_mb'),
            max_t_c=data.get('max_t_c'),
            min_t_c=data.get('min_t_c'),
            max_t24hr_c=data.get('max_t24hr_c'),
            min_t24hr_c=data.get('min_t24hr_c'),
            precip_in=data.get('precip_in'),
            pcp3hr_in=data.get('pcp3hr_in'),
            pcp6hr_in=data.get('pcp6hr_in'),
            pcp24hr_in=data.get('pcp24hr_in'),
            snow_in=data.get('snow_in'),
            vert_vis_ft=data.get('vert_vis_ft'),
            wx_string=data.get('wx_string', ''),
            sky_conditions=sky_conditions,
            quality_flags=quality_flags,
            flight_category=FlightCategory.from_text(data.get('flight_category')),
        )

    def __repr__(self) -> str:
        return f"MetarReport({self.metar_type.value} {self.station_id} {self.flight_category.value})"
