import pytest
from pathlib import Path
from typing import Callable

from dateutil import tz


def make_document(*metars: str) -> bytes:
    """Wrap METAR element bodies in an ADDS response document."""
    body = "".join(f"<METAR>{metar}</METAR>" for metar in metars)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<response version="1.2">'
        f'<data num_results="{len(metars)}">{body}</data>'
        '</response>'
    ).encode('utf-8')


@pytest.fixture
def test_assets_dir() -> Path:
    """Return the path to the test assets directory."""
    return Path(__file__).parent / 'assets'


@pytest.fixture
def test_cache_dir(tmp_path) -> Path:
    """Return a temporary directory for cache testing."""
    return tmp_path / 'cache'


@pytest.fixture
def kpdx_xml(test_assets_dir) -> bytes:
    """Two routine KPDX reports, newest first."""
    return (test_assets_dir / 'kpdx.xml').read_bytes()


@pytest.fixture
def kjfk_xml(test_assets_dir) -> bytes:
    """One corrected IFR SPECI with gusts, weather and two ceiling layers."""
    return (test_assets_dir / 'kjfk_ifr.xml').read_bytes()


@pytest.fixture
def empty_xml(test_assets_dir) -> bytes:
    """A valid response without any METAR element."""
    return (test_assets_dir / 'empty.xml').read_bytes()


@pytest.fixture
def document_builder() -> Callable[..., bytes]:
    return make_document


@pytest.fixture
def utc_local():
    """Use UTC as the local time zone so rendered times are stable."""
    return tz.UTC
