"""Tests for weather classification helpers."""

import pytest

from wxmetar.analysis import WeatherAnalyzer
from wxmetar.models import FlightCategory, SkyCover


class TestVfrCeiling:

    @pytest.mark.parametrize("cover", [SkyCover.SKC, SkyCover.CLR, SkyCover.CAVOK, SkyCover.FEW, SkyCover.SCT])
    def test_not_a_ceiling(self, cover):
        assert WeatherAnalyzer.is_vfr_ceiling(cover)

    @pytest.mark.parametrize("cover", [SkyCover.BKN, SkyCover.OVC, SkyCover.OVX, SkyCover.UNKNOWN])
    def test_ceiling(self, cover):
        assert not WeatherAnalyzer.is_vfr_ceiling(cover)


class TestLabels:

    def test_sky_cover_labels(self):
        assert WeatherAnalyzer.sky_cover_label(SkyCover.CLR) == "Clear below 12,000 feet"
        assert WeatherAnalyzer.sky_cover_label(SkyCover.BKN) == "Broken clouds"
        assert WeatherAnalyzer.sky_cover_label(SkyCover.OVX) == "Sky obscured"
        assert WeatherAnalyzer.sky_cover_label(SkyCover.UNKNOWN) == "Unknown"

    def test_flight_category_plain(self):
        assert WeatherAnalyzer.flight_category_label(FlightCategory.LIFR) == "LIFR"

    def test_flight_category_color(self):
        assert WeatherAnalyzer.flight_category_label(FlightCategory.VFR, color=True) == "\033[1;32mVFR\033[0m"
        assert WeatherAnalyzer.flight_category_label(FlightCategory.MVFR, color=True) == "\033[1;34mMVFR\033[0m"
        assert WeatherAnalyzer.flight_category_label(FlightCategory.IFR, color=True) == "\033[1;31mIFR\033[0m"
        assert WeatherAnalyzer.flight_category_label(FlightCategory.LIFR, color=True) == "\033[1;35mLIFR\033[0m"

    def test_flight_category_unknown_never_colored(self):
        assert WeatherAnalyzer.flight_category_label(FlightCategory.UNKNOWN, color=True) == "???"


class TestConversions:

    def test_celsius_to_fahrenheit(self):
        assert WeatherAnalyzer.celsius_to_fahrenheit(15.0) == 59.0
        assert WeatherAnalyzer.celsius_to_fahrenheit(-40.0) == -40.0

    def test_inhg_to_mb(self):
        assert WeatherAnalyzer.inhg_to_mb(30.0) == pytest.approx(1015.5)
