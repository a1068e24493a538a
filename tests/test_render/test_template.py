"""Tests for {placeholder} template rendering."""

import re
from datetime import datetime

import pytest
from dateutil import tz

from wxmetar.exceptions import OutputCapacityExceeded
from wxmetar.models import MetarReport, QualityFlag, ReportType, SkyCover, SkyCondition, FlightCategory
from wxmetar.parser import MetarDocumentParser
from wxmetar.render import BoundedBuffer, TemplateRenderer, PLACEHOLDER_VERSION


@pytest.fixture
def renderer(utc_local):
    return TemplateRenderer(local_tz=utc_local)


@pytest.fixture
def kpdx(kpdx_xml):
    return MetarDocumentParser.parse_document(kpdx_xml)[0]


class TestBoundedBuffer:

    def test_append(self):
        buffer = BoundedBuffer(10)
        buffer.append("abc")
        buffer.append("def")
        assert buffer.getvalue() == "abcdef"
        assert len(buffer) == 6

    def test_append_never_reaches_capacity(self):
        buffer = BoundedBuffer(10)
        buffer.append("123456789")
        with pytest.raises(OutputCapacityExceeded):
            buffer.append("0")
        assert buffer.getvalue() == "123456789"

    def test_append_rejects_whole_text(self):
        buffer = BoundedBuffer(10)
        buffer.append("12345")
        with pytest.raises(OutputCapacityExceeded):
            buffer.append("abcde")
        assert buffer.getvalue() == "12345"

    def test_append_verbatim_truncates(self):
        buffer = BoundedBuffer(10)
        written = buffer.append_verbatim("abcdefghijkl")
        assert written == 9
        assert buffer.getvalue() == "abcdefghi"
        assert buffer.append_verbatim("x") == 0


class TestSubstitution:

    def test_raw_text_only(self, renderer, kpdx):
        assert renderer.render("{raw_text}", kpdx) == kpdx.raw_text

    def test_no_placeholders_unchanged(self, renderer, kpdx):
        template = "Weather report: {not_a_token} {} { station_id } {Station_ID}\n\t"
        assert renderer.render(template, kpdx) == template

    def test_nested_braces(self, renderer, kpdx):
        assert renderer.render("{{station_id}}", kpdx) == "{KPDX}"

    def test_unrecognized_verbatim(self, renderer, kpdx):
        assert renderer.render("{foo}{bar}", kpdx) == "{foo}{bar}"

    def test_repeated_token(self, renderer, kpdx):
        assert renderer.render("{station_id}/{station_id}", kpdx) == "KPDX/KPDX"

    def test_single_pass(self, renderer):
        report = MetarReport(station_id="KPDX", raw_text="{station_id}")
        assert renderer.render("{raw_text} {station_id}", report) == "{station_id} KPDX"

    def test_kpdx_fields(self, renderer, kpdx):
        result = renderer.render(
            "{station_id} {metar_type} {temp_c}/{dewpoint_c} {temp_f}F "
            "{wind_dir_degrees}@{wind_speed_kt} vis {visibility_statute_mi} "
            "{altim_in_hg} {sea_level_pressure_mb} {latitude},{longitude} "
            "{elevation_m}m {flight_category} [{quality_control_flags}] {sky_condition}",
            kpdx,
        )
        assert result == (
            "KPDX METAR 15.0/10.0 59.0F 270@8 vis 10.0 "
            "30.12 1020.10 45.59,-122.60 6.0m VFR [AUTOST] FEW5000"
        )

    def test_times(self, renderer, kpdx):
        assert renderer.render("{observation_time}", kpdx) == "2024-05-12 18:53:00 (UTC)"
        assert renderer.render("{observation_localtime}", kpdx) == "2024-05-12 18:53:00 (local)"

    def test_local_time_zone(self, kpdx):
        renderer = TemplateRenderer(local_tz=tz.gettz("America/Los_Angeles"))
        assert renderer.render("{observation_time_local}", kpdx) == "2024-05-12 11:53:00 (local)"

    def test_aliases(self, renderer):
        report = MetarReport(max_t_c=21.0, min_t_c=8.0, max_t24hr_c=22.0, min_t24hr_c=7.0,
                             sky_conditions=[SkyCondition(SkyCover.OVC, 800)])
        assert renderer.render("{maxT_c} {minT_c} {maxT24hr_c} {minT24hr_c}", report) == "21.0 8.0 22.0 7.0"
        assert renderer.render("{sky_conditions}", report) == "OVC800"

    def test_unknown_metar_type(self, renderer):
        assert renderer.render("{metar_type}", MetarReport()) == "METAR"
        assert renderer.render("{metar_type}", MetarReport(metar_type=ReportType.SPECI)) == "SPECI"

    def test_missing_text_fields_empty(self, renderer):
        assert renderer.render("[{wx_string}][{raw_text}]", MetarReport()) == "[][]"


class TestUnknownValues:

    NUMERIC_AND_TIME = [
        token for token in TemplateRenderer.placeholders()
        if token not in (
            "{raw_text}", "{station_id}", "{metar_type}", "{wx_string}",
            "{quality_control_flags}", "{sky_condition}", "{sky_conditions}",
            "{flight_category}",
        )
    ]

    @pytest.mark.parametrize("token", NUMERIC_AND_TIME)
    def test_renders_unknown(self, renderer, token):
        assert renderer.render(token, MetarReport()) == "(unknown)"

    def test_zero_is_not_unknown(self, renderer):
        report = MetarReport(wind_speed_kt=0, temp_c=0.0)
        assert renderer.render("{wind_speed_kt} {temp_c}", report) == "0 0.0"

    def test_unknown_category(self, renderer):
        assert renderer.render("{flight_category}", MetarReport()) == "???"


class TestSkyAndFlags:

    def test_sky_tokens(self, renderer):
        report = MetarReport(sky_conditions=[
            SkyCondition(SkyCover.CLR),
            SkyCondition(SkyCover.SKC, 0),
            SkyCondition(SkyCover.CAVOK),
            SkyCondition(SkyCover.BKN, 600),
            SkyCondition(SkyCover.UNKNOWN, 1500),
        ])
        assert renderer.render("{sky_condition}", report) == "CLR SKC CAVOK BKN600 ???1500"

    def test_quality_flags_canonical_order(self, renderer):
        report = MetarReport(
            quality_flags=QualityFlag.WEATHER_OFF | QualityFlag.CORRECTED | QualityFlag.NO_SIGNAL
        )
        assert renderer.render("{quality_control_flags}", report) == "COR NOSIG INOP"

    def test_colored_category(self, utc_local):
        renderer = TemplateRenderer(color=True, local_tz=utc_local)
        report = MetarReport(flight_category=FlightCategory.MVFR)
        assert renderer.render("{flight_category}", report) == "\033[1;34mMVFR\033[0m"


class TestCapacity:

    def test_output_below_capacity(self, utc_local):
        renderer = TemplateRenderer(capacity=32, local_tz=utc_local)
        result = renderer.render("x" * 100, MetarReport())
        assert result == "x" * 31

    def test_overflowing_replacement_copies_token(self, utc_local):
        renderer = TemplateRenderer(capacity=40, local_tz=utc_local)
        report = MetarReport(station_id="KPDX", raw_text="R" * 50)
        assert renderer.render("{raw_text} {station_id}", report) == "{raw_text} KPDX"

    def test_later_tokens_still_substituted(self, utc_local):
        renderer = TemplateRenderer(capacity=20, local_tz=utc_local)
        report = MetarReport(station_id="KPDX", raw_text="R" * 30, temp_c=15.0)
        assert renderer.render("{raw_text}{temp_c}", report) == "{raw_text}15.0"


class TestVocabulary:

    def test_version(self):
        assert PLACEHOLDER_VERSION == 1

    def test_placeholders_well_formed(self):
        tokens = TemplateRenderer.placeholders()
        assert "{raw_text}" in tokens
        assert "{observation_time_local}" in tokens
        assert all(re.fullmatch(r"\{[A-Za-z0-9_]+\}", token) for token in tokens)

    def test_renders_every_placeholder(self, renderer, kpdx):
        result = renderer.render(" ".join(TemplateRenderer.placeholders()), kpdx)
        assert "{" not in result.replace(kpdx.raw_text, "")

    def test_datetime_observation(self, renderer):
        report = MetarReport(observation_time=datetime(2024, 1, 2, 3, 4, 5, tzinfo=tz.UTC))
        assert renderer.render("{observation_time}", report) == "2024-01-02 03:04:05 (UTC)"
