import eliot
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Hypothesis configuration for property-based testing
from hypothesis import settings
from kplay.controls import AudioTransport, VideoTransport
from kplay.session import PlaybackSession
from tests.helpers.factories import make_track
from tests.mocks import MockMediaElement

# Register Hypothesis profiles
settings.register_profile("fast", max_examples=50, deadline=None)
settings.register_profile("thorough", max_examples=1000, deadline=None)
settings.load_profile("fast")  # Default to fast profile


def pytest_collection_modifyitems(items):
    """Automatically order tests: unit tests first, then property tests.

    Individual tests marked with @pytest.mark.order("last") will run at the very end.
    """
    for item in items:
        # Skip if item already has explicit order marker
        if hasattr(item, 'get_closest_marker') and item.get_closest_marker('order'):
            continue

        test_file = str(item.fspath)
        if 'test_unit_' in test_file:
            item.add_marker(pytest.mark.order(1))
        elif 'test_props_' in test_file:
            item.add_marker(pytest.mark.order(2))


@pytest.fixture
def tracks():
    """Three queued tracks: A, B, C."""
    return [make_track("A"), make_track("B"), make_track("C")]


@pytest.fixture
def session():
    return PlaybackSession()


@pytest.fixture
def element():
    return MockMediaElement()


@pytest.fixture
def audio(session, element):
    """AudioTransport bound to a mock element."""
    transport = AudioTransport(session, element)
    yield transport
    transport.close()


@pytest.fixture
def video_element():
    return MockMediaElement()


@pytest.fixture
def video(session, video_element):
    """VideoTransport bound to a mock element, load timeout disabled."""
    transport = VideoTransport(session, video_element, load_timeout=None)
    yield transport
    transport.close()


@pytest.fixture
def eliot_messages():
    """Collect eliot messages emitted during a test."""
    messages = []
    eliot.add_destinations(messages.append)
    yield messages
    eliot.remove_destination(messages.append)

