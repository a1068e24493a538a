"""Weather classification: sky cover, VFR ceilings, flight category labels."""

from wxmetar.models import FlightCategory, SkyCover
from wxmetar.ansi import BOLD_GREEN, BOLD_BLUE, BOLD_RED, BOLD_MAGENTA, colorize


_VFR_COVERS = frozenset({
    SkyCover.SKC,
    SkyCover.CLR,
    SkyCover.CAVOK,
    SkyCover.FEW,
    SkyCover.SCT,
})

_SKY_COVER_LABELS = {
    SkyCover.SKC: "Sky clear",
    SkyCover.CLR: "Clear below 12,000 feet",
    SkyCover.CAVOK: "Ceiling/visibility okay",
    SkyCover.FEW: "Few clouds",
    SkyCover.SCT: "Scattered clouds",
    SkyCover.BKN: "Broken clouds",
    SkyCover.OVC: "Overcast",
    SkyCover.OVX: "Sky obscured",
}

_CATEGORY_COLORS = {
    FlightCategory.VFR: BOLD_GREEN,
    FlightCategory.MVFR: BOLD_BLUE,
    FlightCategory.IFR: BOLD_RED,
    FlightCategory.LIFR: BOLD_MAGENTA,
}

# 1 inHg in millibars
INHG_TO_MB = 33.85


class WeatherAnalyzer:
    """
    Aviation weather classification functions.

    All methods are static: pure functions with no state.
    """

    @staticmethod
    def is_vfr_ceiling(cover: SkyCover) -> bool:
        """
        True when a layer with this cover does not form a ceiling.

        Broken, overcast, obscured and unknown covers all count as a
        ceiling.
        """
        return cover in _VFR_COVERS

    @staticmethod
    def sky_cover_label(cover: SkyCover) -> str:
        """Descriptive phrase for a sky cover, 'Unknown' if unrecognized."""
        return _SKY_COVER_LABELS.get(cover, "Unknown")

    @staticmethod
    def flight_category_label(category: FlightCategory, color: bool = False) -> str:
        """
        Short code for a flight category.

        Args:
            category: Flight category
            color: Wrap the code in its ANSI color
                (VFR green, MVFR blue, IFR red, LIFR magenta)

        Returns:
            "VFR", "MVFR", "IFR", "LIFR", or "???" (never colored) when unknown
        """
        if category not in _CATEGORY_COLORS:
            return "???"
        if color:
            return colorize(category.value, _CATEGORY_COLORS[category])
        return category.value

    @staticmethod
    def celsius_to_fahrenheit(deg_c: float) -> float:
        return deg_c * 9.0 / 5.0 + 32.0

    @staticmethod
    def inhg_to_mb(inhg: float) -> float:
        return inhg * INHG_TO_MB
