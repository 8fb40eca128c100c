"""
Identify orchestrator: demo vs live paths, blanket fallback, loading flag.
"""
from unittest.mock import Mock

import httpx
import pytest

from conftest import PEACE_LILY_ENVELOPE, VALID_KEY, envelope
from plantsnap.adapters.vision.openai_vision import OpenAIVision
from plantsnap.orchestrator.contracts import PlantResult, Phase, DEMO_RESULT, fallback_result
from plantsnap.orchestrator.errors import NotReadyError, TransportError, ContentDecodeError
from plantsnap.orchestrator.state_machine import IdentifyOrchestrator

FALLBACK = PlantResult(
    common_name="unknown",
    scientific_name="unknown",
    confidence=0.0,
    care=[],
    notes="Unable to parse response",
)

SNAKE_PLANT = PlantResult("Snake Plant", "Dracaena trifasciata", 0.88, ["Water sparingly"])


@pytest.fixture
def vision():
    v = Mock()
    v.identify.return_value = SNAKE_PLANT
    return v


@pytest.fixture
def orch(vision, authed_session, status):
    o = IdentifyOrchestrator(vision=vision, session=authed_session, status_store=status, demo_delay=0)
    o.set_image(b"image-bytes")
    return o


def record(orch, field):
    seen = []
    orch.subscribe(lambda name, value: seen.append(value) if name == field else None)
    return seen


class TestSetImage:
    def test_clears_previous_result(self, orch):
        orch.identify()
        assert orch.result is not None

        orch.set_image(b"another")

        assert orch.image == b"another"
        assert orch.result is None
        assert orch.phase == Phase.IDLE


class TestLive:
    def test_success(self, orch, vision):
        result = orch.identify()

        vision.identify.assert_called_once_with(b"image-bytes", VALID_KEY)
        assert result == SNAKE_PLANT
        assert orch.result == SNAKE_PLANT
        assert orch.phase == Phase.SUCCESS

    @pytest.mark.parametrize("exc", [
        TransportError("HTTP 401", status_code=401),
        ContentDecodeError("content is not JSON"),
        RuntimeError("something else entirely"),
    ])
    def test_any_failure_becomes_fallback(self, orch, vision, exc):
        vision.identify.side_effect = exc

        result = orch.identify()

        assert result == FALLBACK
        assert orch.result == FALLBACK
        assert orch.phase == Phase.FALLBACK
        assert orch.is_loading is False

    def test_fallback_is_fresh_each_time(self):
        a = fallback_result()
        a.care.append("mutated")
        assert fallback_result().care == []

    def test_loading_toggles_once_on_success(self, orch):
        seen = record(orch, "is_loading")
        orch.identify()
        assert seen == [True, False]

    def test_loading_toggles_once_on_failure(self, orch, vision):
        vision.identify.side_effect = TransportError("down")
        seen = record(orch, "is_loading")
        orch.identify()
        assert seen == [True, False]

    def test_loading_visible_while_in_flight(self, orch, vision):
        during = []
        vision.identify.side_effect = lambda image, key: during.append(orch.is_loading) or SNAKE_PLANT
        orch.identify()
        assert during == [True]
        assert orch.is_loading is False

    def test_loading_reset_when_listener_raises(self, orch):
        def boom(name, value):
            if name == "result":
                raise RuntimeError("listener failed")

        orch.subscribe(boom)
        with pytest.raises(RuntimeError):
            orch.identify()
        assert orch.is_loading is False

    def test_phase_sequence(self, orch):
        seen = record(orch, "phase")
        orch.identify()
        assert seen == [Phase.LOADING, Phase.SUCCESS]


class TestDemo:
    def test_never_calls_vision(self, orch, vision):
        orch.set_demo_mode(True)

        result = orch.identify()

        vision.identify.assert_not_called()
        assert result == DEMO_RESULT
        assert result.common_name == "Peace Lily"
        assert orch.phase == Phase.SUCCESS

    def test_sleeps_for_demo_delay(self, vision, authed_session, status, monkeypatch):
        sleeps = []
        monkeypatch.setattr("plantsnap.orchestrator.state_machine.time.sleep", sleeps.append)
        o = IdentifyOrchestrator(vision=vision, session=authed_session, status_store=status, demo_delay=1.0)
        o.set_image(b"x")
        o.set_demo_mode(True)
        o.identify()
        assert sleeps == [1.0]

    def test_result_is_fresh_each_time(self, orch):
        orch.set_demo_mode(True)
        first = orch.identify()
        first.care.append("changed by a caller")

        second = orch.identify()

        assert second.care == ["Keep soil moist", "Bright indirect light"]
        assert DEMO_RESULT.care == ["Keep soil moist", "Bright indirect light"]

    def test_loading_toggles_once(self, orch):
        orch.set_demo_mode(True)
        seen = record(orch, "is_loading")
        orch.identify()
        assert seen == [True, False]

    def test_toggle_back_to_live(self, orch, vision):
        orch.set_demo_mode(True)
        orch.set_demo_mode(False)
        assert orch.identify() == SNAKE_PLANT
        vision.identify.assert_called_once()


class TestPreconditions:
    def test_no_image(self, vision, authed_session, status):
        o = IdentifyOrchestrator(vision=vision, session=authed_session, status_store=status, demo_delay=0)
        with pytest.raises(NotReadyError):
            o.identify()
        vision.identify.assert_not_called()

    def test_no_key(self, vision, session, status):
        o = IdentifyOrchestrator(vision=vision, session=session, status_store=status, demo_delay=0)
        o.set_image(b"x")
        with pytest.raises(NotReadyError):
            o.identify()
        assert o.is_loading is False

    def test_busy(self, orch, vision):
        orch.is_loading = True
        with pytest.raises(NotReadyError):
            orch.identify()
        vision.identify.assert_not_called()


class TestWithHttpClient:
    """Orchestrator + real OpenAIVision over a mocked transport."""

    def make(self, handler, session, status):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        vision = OpenAIVision(status, url="https://api.test/v1/chat/completions", http_client=client)
        return IdentifyOrchestrator(vision=vision, session=session, status_store=status, demo_delay=0)

    def test_peace_lily(self, authed_session, status, png_bytes):
        o = self.make(lambda r: httpx.Response(200, text=PEACE_LILY_ENVELOPE), authed_session, status)
        o.set_image(png_bytes)
        assert o.identify() == DEMO_RESULT

    def test_401_falls_back(self, authed_session, status, png_bytes):
        o = self.make(lambda r: httpx.Response(401, json={"error": {}}), authed_session, status)
        o.set_image(png_bytes)
        assert o.identify() == FALLBACK

    def test_garbage_content_falls_back(self, authed_session, status, png_bytes):
        o = self.make(lambda r: httpx.Response(200, json=envelope("a lovely fern")), authed_session, status)
        o.set_image(png_bytes)
        assert o.identify() == FALLBACK
