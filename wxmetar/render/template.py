"""User-supplied template rendering with {placeholder} substitution."""

import re
import logging
from datetime import tzinfo
from typing import Callable, Dict, Optional, Tuple, Any

from dateutil import tz

from wxmetar.analysis import WeatherAnalyzer
from wxmetar.exceptions import OutputCapacityExceeded
from wxmetar.models import MetarReport, ReportType, SkyCover, QUALITY_FLAG_FIELDS

logger = logging.getLogger(__name__)

# Bumped whenever a placeholder is added, removed or changes meaning
PLACEHOLDER_VERSION = 1

DEFAULT_CAPACITY = 8192
UNKNOWN = "(unknown)"

_PLACEHOLDER = re.compile(r"\{[A-Za-z0-9_]+\}")


class BoundedBuffer:
    """
    Growable string buffer that never reaches its capacity.

    The content length always stays strictly below capacity, leaving the
    same headroom a NUL-terminated buffer of that size would.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self.capacity = capacity
        self._parts = []
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def append(self, text: str) -> None:
        """
        Append text as a whole.

        Raises:
            OutputCapacityExceeded: if text does not fit; nothing is written
        """
        if self._length + len(text) >= self.capacity:
            raise OutputCapacityExceeded(
                f"{len(text)} characters do not fit ({self._length}/{self.capacity} used)"
            )
        self._parts.append(text)
        self._length += len(text)

    def append_verbatim(self, text: str) -> int:
        """Append as many leading characters of text as fit, returns the count."""
        room = max(self.capacity - 1 - self._length, 0)
        chunk = text[:room]
        if chunk:
            self._parts.append(chunk)
            self._length += len(chunk)
        return len(chunk)

    def getvalue(self) -> str:
        return "".join(self._parts)


class TemplateRenderer:
    """
    Substitute {placeholder} tokens in a template with report values.

    The vocabulary is closed (see `placeholders()`); any other {...}
    sequence is copied unchanged. The template is scanned once, left to
    right, so replacement text is never scanned for placeholders again.
    Missing values render as "(unknown)".

    When a replacement would overflow the output capacity, that occurrence
    is skipped and the placeholder text itself is copied instead.

    Example:
        renderer = TemplateRenderer()
        renderer.render("{station_id}: {temp_c}C", report)  # "KPDX: 15.0C"
    """

    def __init__(
        self,
        color: bool = False,
        capacity: int = DEFAULT_CAPACITY,
        local_tz: Optional[tzinfo] = None,
    ):
        """
        Args:
            color: Color the {flight_category} token
            capacity: Output capacity in characters
            local_tz: Time zone for {observation_localtime} (system local
                time zone by default)
        """
        self.color = color
        self.capacity = capacity
        self.local_tz = local_tz or tz.tzlocal()
        self._vocabulary = self._build_vocabulary()

    @classmethod
    def placeholders(cls) -> Tuple[str, ...]:
        """All recognized placeholder tokens."""
        return tuple(cls()._vocabulary)

    def render(self, template: str, report: MetarReport) -> str:
        buffer = BoundedBuffer(self.capacity)
        values: Dict[str, str] = {}
        pos = 0

        for match in _PLACEHOLDER.finditer(template):
            buffer.append_verbatim(template[pos:match.start()])
            pos = match.end()

            token = match.group(0)
            entry = self._vocabulary.get(token)
            if entry is None:
                buffer.append_verbatim(token)
                continue

            if token not in values:
                extractor, formatter = entry
                values[token] = formatter(extractor(report))
            try:
                buffer.append(values[token])
            except OutputCapacityExceeded as e:
                logger.debug("Skipping %s: %s", token, e)
                buffer.append_verbatim(token)

        buffer.append_verbatim(template[pos:])
        return buffer.getvalue()

    # --- Vocabulary ---

    def _build_vocabulary(self) -> Dict[str, Tuple[Callable[[MetarReport], Any], Callable[[Any], str]]]:
        c_to_f = WeatherAnalyzer.celsius_to_fahrenheit

        def fahrenheit(value: Optional[float]) -> Optional[float]:
            return None if value is None else c_to_f(value)

        vocabulary = {
            '{raw_text}': (lambda r: r.raw_text, self._text),
            '{station_id}': (lambda r: r.station_id, self._text),
            '{metar_type}': (lambda r: r.metar_type, self._metar_type),
            '{observation_time}': (lambda r: r.observation_time, self._utc_time),
            '{observation_localtime}': (lambda r: r.observation_time, self._local_time),
            '{latitude}': (lambda r: r.latitude, self._float2),
            '{longitude}': (lambda r: r.longitude, self._float2),
            '{elevation_m}': (lambda r: r.elevation_m, self._float1),
            '{temp_c}': (lambda r: r.temp_c, self._float1),
            '{temp_f}': (lambda r: fahrenheit(r.temp_c), self._float1),
            '{dewpoint_c}': (lambda r: r.dewpoint_c, self._float1),
            '{dewpoint_f}': (lambda r: fahrenheit(r.dewpoint_c), self._float1),
            '{wind_dir_degrees}': (lambda r: r.wind_dir_degrees, self._int),
            '{wind_speed_kt}': (lambda r: r.wind_speed_kt, self._int),
            '{wind_gust_kt}': (lambda r: r.wind_gust_kt, self._int),
            '{visibility_statute_mi}': (lambda r: r.visibility_statute_mi, self._float1),
            '{altim_in_hg}': (lambda r: r.altim_in_hg, self._float2),
            '{sea_level_pressure_mb}': (lambda r: r.sea_level_pressure_mb, self._float2),
            '{three_hr_pressure_tendency_mb}': (lambda r: r.three_hr_pressure_tendency_mb, self._float2),
            '{quality_control_flags}': (lambda r: r, self._quality_flags),
            '{wx_string}': (lambda r: r.wx_string, self._text),
            '{sky_condition}': (lambda r: r.sky_conditions, self._sky_conditions),
            '{flight_category}': (lambda r: r.flight_category, self._flight_category),
            '{max_t_c}': (lambda r: r.max_t_c, self._float1),
            '{min_t_c}': (lambda r: r.min_t_c, self._float1),
            '{max_t24hr_c}': (lambda r: r.max_t24hr_c, self._float1),
            '{min_t24hr_c}': (lambda r: r.min_t24hr_c, self._float1),
            '{precip_in}': (lambda r: r.precip_in, self._float1),
            '{pcp3hr_in}': (lambda r: r.pcp3hr_in, self._float1),
            '{pcp6hr_in}': (lambda r: r.pcp6hr_in, self._float1),
            '{pcp24hr_in}': (lambda r: r.pcp24hr_in, self._float1),
            '{snow_in}': (lambda r: r.snow_in, self._float1),
            '{vert_vis_ft}': (lambda r: r.vert_vis_ft, self._int),
        }

        # Alternate spellings
        vocabulary['{observation_time_local}'] = vocabulary['{observation_localtime}']
        vocabulary['{sky_conditions}'] = vocabulary['{sky_condition}']
        vocabulary['{maxT_c}'] = vocabulary['{max_t_c}']
        vocabulary['{minT_c}'] = vocabulary['{min_t_c}']
        vocabulary['{maxT24hr_c}'] = vocabulary['{max_t24hr_c}']
        vocabulary['{minT24hr_c}'] = vocabulary['{min_t24hr_c}']
        return vocabulary

    # --- Formatters ---

    @staticmethod
    def _text(value: str) -> str:
        return value or ""

    @staticmethod
    def _int(value: Optional[int]) -> str:
        if value is None:
            return UNKNOWN
        return str(value)

    @staticmethod
    def _float1(value: Optional[float]) -> str:
        if value is None:
            return UNKNOWN
        return f"{value:.1f}"

    @staticmethod
    def _float2(value: Optional[float]) -> str:
        if value is None:
            return UNKNOWN
        return f"{value:.2f}"

    @staticmethod
    def _utc_time(value) -> str:
        if value is None:
            return UNKNOWN
        return value.astimezone(tz.UTC).strftime("%Y-%m-%d %H:%M:%S (UTC)")

    def _local_time(self, value) -> str:
        if value is None:
            return UNKNOWN
        return value.astimezone(self.local_tz).strftime("%Y-%m-%d %H:%M:%S (local)")

    @staticmethod
    def _metar_type(value: ReportType) -> str:
        return "SPECI" if value is ReportType.SPECI else "METAR"

    def _flight_category(self, value) -> str:
        return WeatherAnalyzer.flight_category_label(value, self.color)

    @staticmethod
    def _quality_flags(report: MetarReport) -> str:
        return " ".join(token for flag, _, token in QUALITY_FLAG_FIELDS if report.has_flag(flag))

    @staticmethod
    def _sky_conditions(layers) -> str:
        tokens = []
        for layer in layers:
            token = layer.cover.code
            if layer.cover not in (SkyCover.SKC, SkyCover.CLR) and layer.cloud_base_ft_agl is not None:
                token += str(layer.cloud_base_ft_agl)
            tokens.append(token)
        return " ".join(tokens)
