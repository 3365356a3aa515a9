"""Pytest configuration and shared fixtures for VAST document tests."""

from pathlib import Path

import pytest
import structlog

from vast_document.config import NormalizerConfig, VastParserConfig
from vast_document.parser import VastParser


# ==================== Path Fixtures ====================


@pytest.fixture(scope="session")
def tests_dir() -> Path:
    """Get tests directory path."""
    return Path(__file__).parent


# ==================== Logging ====================


@pytest.fixture(autouse=True)
def clean_log_context():
    """Make sure no document context or logging configuration leaks between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


# ==================== Configuration Fixtures ====================


@pytest.fixture
def parser_config() -> VastParserConfig:
    """Create default parser configuration."""
    return VastParserConfig(
        recover_on_error=False,
        encoding="utf-8",
    )


@pytest.fixture
def normalizer_config() -> NormalizerConfig:
    """Create a normalizer configuration selecting one 720p MP4."""
    return NormalizerConfig(
        secure=True,
        formats=["video/mp4"],
        target_width=1280,
        target_height=720,
    )


@pytest.fixture
def vast_parser(parser_config: VastParserConfig) -> VastParser:
    """Create VAST parser instance."""
    return VastParser(config=parser_config)


# ==================== VAST XML Fixtures ====================


@pytest.fixture
def minimal_vast_xml() -> str:
    """Minimal valid VAST 3.0 XML."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<VAST version="3.0">
  <Ad id="test-ad-001">
    <InLine>
      <AdSystem version="1.0">Test Ad System</AdSystem>
      <AdTitle><![CDATA[Test Ad Title]]></AdTitle>
      <Impression id="imp-1"><![CDATA[https://tracking.example.com/impression]]></Impression>
      <Creatives>
        <Creative id="creative-001" AdID="ad-001">
          <Linear>
            <Duration>00:00:15</Duration>
            <TrackingEvents>
              <Tracking event="start"><![CDATA[https://tracking.example.com/start]]></Tracking>
              <Tracking event="complete"><![CDATA[https://tracking.example.com/complete]]></Tracking>
            </TrackingEvents>
            <MediaFiles>
              <MediaFile delivery="progressive" type="video/mp4" width="1280" height="720"><![CDATA[https://media.example.com/video.mp4]]></MediaFile>
            </MediaFiles>
          </Linear>
        </Creative>
      </Creatives>
    </InLine>
  </Ad>
</VAST>"""


@pytest.fixture
def multi_media_vast_xml() -> str:
    """VAST 3.0 with three renditions (two landscape, one portrait) and an empty impression."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<VAST version="3.0">
  <Ad id="multi-ad">
    <InLine>
      <AdSystem>Test Ad System</AdSystem>
      <AdTitle><![CDATA[Multi Rendition]]></AdTitle>
      <Impression><![CDATA[http://tracking.example.com/impression]]></Impression>
      <Impression><![CDATA[]]></Impression>
      <Creatives>
        <Creative id="creative-multi">
          <Linear skipoffset="00:00:05">
            <Duration>00:00:30</Duration>
            <TrackingEvents>
              <Tracking event="start"><![CDATA[http://tracking.example.com/start]]></Tracking>
              <Tracking event="progress" offset="25%"><![CDATA[http://tracking.example.com/progress]]></Tracking>
            </TrackingEvents>
            <VideoClicks>
              <ClickThrough><![CDATA[http://advertiser.example.com/landing]]></ClickThrough>
              <ClickTracking><![CDATA[//tracking.example.com/click]]></ClickTracking>
            </VideoClicks>
            <MediaFiles>
              <MediaFile delivery="progressive" type="video/mp4" width="1920" height="1080"><![CDATA[http://media.example.com/1080p.mp4]]></MediaFile>
              <MediaFile delivery="progressive" type="video/webm" width="1280" height="720"><![CDATA[http://media.example.com/720p.webm]]></MediaFile>
              <MediaFile delivery="progressive" type="video/mp4" width="720" height="1280"><![CDATA[http://media.example.com/portrait.mp4]]></MediaFile>
            </MediaFiles>
          </Linear>
        </Creative>
      </Creatives>
      <Error><![CDATA[http://tracking.example.com/error?code=[ERRORCODE]]]></Error>
    </InLine>
  </Ad>
</VAST>"""


@pytest.fixture
def wrapper_vast_xml() -> str:
    """VAST 3.0 wrapper redirecting to another ad tag."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<VAST version="3.0">
  <Ad id="wrapper-ad" sequence="2">
    <Wrapper followAdditionalWrappers="false" fallbackOnNoAd="1">
      <AdSystem>Wrapper System</AdSystem>
      <VASTAdTagURI><![CDATA[http://adserver.example.com/vast.xml]]></VASTAdTagURI>
      <Impression><![CDATA[ http://wrapper.example.com/impression ]]></Impression>
      <Impression><![CDATA[]]></Impression>
      <Error><![CDATA[http://wrapper.example.com/error]]></Error>
      <Creatives>
        <Creative>
          <Linear>
            <TrackingEvents>
              <Tracking event="start"><![CDATA[http://wrapper.example.com/start]]></Tracking>
            </TrackingEvents>
          </Linear>
        </Creative>
      </Creatives>
    </Wrapper>
  </Ad>
</VAST>"""


@pytest.fixture
def extensions_vast_xml() -> str:
    """VAST 3.0 with one custom-tracking and one raw-data extension."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<VAST version="3.0">
  <Ad id="ext-ad">
    <InLine>
      <AdSystem>Test Ad System</AdSystem>
      <AdTitle><![CDATA[Extensions]]></AdTitle>
      <Impression><![CDATA[https://tracking.example.com/impression]]></Impression>
      <Creatives>
        <Creative>
          <Linear>
            <Duration>00:00:10</Duration>
            <MediaFiles>
              <MediaFile delivery="progressive" type="video/mp4" width="640" height="360"><![CDATA[https://media.example.com/360p.mp4]]></MediaFile>
            </MediaFiles>
          </Linear>
        </Creative>
      </Creatives>
      <Extensions>
        <Extension type="tracker" name="vendor" fallback_index="1">
          <CustomTracking>
            <Tracking event="viewable"><![CDATA[https://vendor.example.com/viewable]]></Tracking>
          </CustomTracking>
        </Extension>
        <Extension type="waterfall"><Slot id="3">pre</Slot><Rank>1</Rank></Extension>
      </Extensions>
    </InLine>
  </Ad>
</VAST>"""


@pytest.fixture
def empty_vast_xml() -> str:
    """VAST response without ads."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<VAST version="3.0">
</VAST>"""
