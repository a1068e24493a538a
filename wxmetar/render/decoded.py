"""Fixed human-readable layout for one METAR report."""

from datetime import tzinfo
from typing import Optional, List

from dateutil import tz

from wxmetar.analysis import WeatherAnalyzer
from wxmetar.ansi import BOLD_RED, BOLD_YELLOW, BOLD_BLUE, BOLD_MAGENTA, colorize
from wxmetar.models import MetarReport, QualityFlag, SkyCover, SkyCondition

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Severity thresholds for color output
STRONG_WIND_KT = 10
GUST_SPREAD_KT = 5


class DecodedRenderer:
    """
    Render a MetarReport as a multi-line decoded report.

    Output order: header, correction notice, winds, visibility, sky
    conditions, temperature, dewpoint, pressure, adverse weather, station
    notices and finally the raw report. Fields the report does not carry
    are left out.

    Example:
        print(DecodedRenderer(color=True).render(report))
    """

    def __init__(self, color: bool = False, local_tz: Optional[tzinfo] = None):
        """
        Args:
            color: Highlight severe values with ANSI colors
            local_tz: Time zone used for the local time line (system local
                time zone by default)
        """
        self.color = color
        self.local_tz = local_tz or tz.tzlocal()

    def render(self, report: MetarReport) -> str:
        lines = self._header_lines(report)

        if report.has_flag(QualityFlag.CORRECTED):
            lines.append(self._paint("Corrected version", BOLD_YELLOW))

        lines.append("")

        details = []
        wind = self._wind_line(report)
        if wind:
            details.append(wind)
        if report.visibility_statute_mi is not None:
            details.append(self._visibility_line(report.visibility_statute_mi))
        details.extend(self._sky_line(layer) for layer in report.sky_conditions)
        if report.temp_c is not None:
            details.append(f"Temperature: {self._temperature(report.temp_c)}")
        if report.dewpoint_c is not None:
            details.append(f"Dewpoint: {self._temperature(report.dewpoint_c)}")
        if report.altim_in_hg is not None:
            mb = WeatherAnalyzer.inhg_to_mb(report.altim_in_hg)
            details.append(f'Pressure: {report.altim_in_hg:.2f}" Hg ({mb:.1f} mb)')
        if report.wx_string:
            details.append(f"Adverse weather: {self._paint(report.wx_string, BOLD_YELLOW)}")
        details.extend(self._notice_lines(report))
        details.append(report.raw_text)

        lines.extend(f"\t{line}" for line in details)
        return "\n".join(lines) + "\n"

    def _paint(self, text: str, color: str) -> str:
        return colorize(text, color) if self.color else text

    def _header_lines(self, report: MetarReport) -> List[str]:
        header = report.station_id
        if report.latitude is not None and report.longitude is not None:
            header += f" ({report.latitude:.2f}, {report.longitude:.2f})"
        category = WeatherAnalyzer.flight_category_label(report.flight_category, self.color)
        header += f" [{category}]"

        lines = [header]
        if report.observation_time is not None:
            utc = report.observation_time.astimezone(tz.UTC)
            local = report.observation_time.astimezone(self.local_tz)
            lines.append(f"Observed: {utc.strftime(TIME_FORMAT)} UTC")
            lines.append(f"(Local time: {local.strftime(TIME_FORMAT)})")
        return lines

    def _wind_line(self, report: MetarReport) -> Optional[str]:
        direction = report.wind_dir_degrees
        speed = report.wind_speed_kt
        if direction is None or speed is None or direction < 0 or speed < 0:
            return None
        if speed == 0:
            return "Winds: Calm"

        speed_text = f"{speed} knots"
        if speed >= STRONG_WIND_KT:
            speed_text = self._paint(speed_text, BOLD_RED)

        if direction == 0:
            line = f"Winds: Variable at {speed_text}"
        else:
            line = f"Winds: {direction}° at {speed_text}"

        gust = report.wind_gust_kt
        if gust is not None and gust > 0:
            gust_text = f"gusting {gust} knots"
            if gust - speed >= GUST_SPREAD_KT:
                gust_text = self._paint(gust_text, BOLD_RED)
            line += f" {gust_text}"
        return line

    def _visibility_line(self, miles: float) -> str:
        text = f"{miles:.1f} miles"
        if miles < 1.0:
            text = self._paint(text, BOLD_MAGENTA)
        elif miles < 3.0:
            text = self._paint(text, BOLD_RED)
        elif miles < 5.0:
            text = self._paint(text, BOLD_BLUE)
        return f"Visibility: {text}"

    def _sky_line(self, layer: SkyCondition) -> str:
        if layer.cover in (SkyCover.SKC, SkyCover.CLR):
            return "Sky condition: Clear"

        label = WeatherAnalyzer.sky_cover_label(layer.cover)
        base = layer.cloud_base_ft_agl
        if base is None:
            return f"Sky condition: {label}"

        text = f"{label} at {base} feet"
        if not WeatherAnalyzer.is_vfr_ceiling(layer.cover):
            if base <= 500:
                text = self._paint(text, BOLD_MAGENTA)
            elif base <= 1000:
                text = self._paint(text, BOLD_RED)
            elif base <= 3000:
                text = self._paint(text, BOLD_BLUE)
        return f"Sky condition: {text} above ground level"

    @staticmethod
    def _temperature(deg_c: float) -> str:
        deg_f = WeatherAnalyzer.celsius_to_fahrenheit(deg_c)
        return f"{deg_c:.1f}°C ({deg_f:.1f}°F)"

    def _notice_lines(self, report: MetarReport) -> List[str]:
        notices = []
        if report.has_flag(QualityFlag.MAINTENANCE):
            notices.append(f"{self._paint('Warning', BOLD_YELLOW)}: Station needs maintenance")
        if report.has_flag(QualityFlag.WEATHER_OFF):
            notices.append(f"{self._paint('Warning', BOLD_RED)}: Station offline")
        if report.quality_flags & (QualityFlag.AUTO | QualityFlag.AUTO_STATION):
            notices.append("Automated weather available.")
        return notices
