import threading
from types import SimpleNamespace

import pytest

from visionboard import critic as critic_module
from visionboard.canvas import Canvas
from visionboard.critic import (
    CRITIQUE_PROMPT, FALLBACK_MESSAGE, MockSketchCritic, SketchCritic, create_critic
)
from visionboard.geometry import Point


def completion(text):
    message = SimpleNamespace(content=text)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeClient:
    """Records chat_completion calls and answers with a canned reply."""

    reply = "A bold circle. Very Bauhaus."
    error = None

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.calls = []

    def chat_completion(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return completion(self.reply)


@pytest.fixture
def fake_client(monkeypatch):
    monkeypatch.setattr(critic_module, 'InferenceClient', FakeClient)
    return FakeClient


@pytest.fixture
def inked_png():
    canvas = Canvas(200, 100)
    canvas.draw_polyline([Point(20, 50), Point(180, 50)], (255, 255, 255), 12)
    return canvas.snapshot_png()


def test_mock_critic_on_empty_board():
    result = MockSketchCritic(delay=0).critique(Canvas(64, 48).snapshot_png(), async_mode=False)

    assert result.success
    assert result.text.startswith("An empty board")


def test_mock_critic_reports_coverage(inked_png):
    result = MockSketchCritic(delay=0).critique(inked_png, async_mode=False)

    assert result.success
    assert result.text.startswith("Ink covers")
    assert result.metadata == {'model': 'mock'}


def test_request_carries_prompt_and_image(fake_client, inked_png):
    critic = SketchCritic(api_key="hf_test")
    result = critic.critique(inked_png, async_mode=False)

    assert result.success
    assert result.text == FakeClient.reply
    assert critic._client.kwargs == {'api_key': "hf_test"}

    call = critic._client.calls[0]
    assert call['model'] == SketchCritic.DEFAULT_MODEL
    text_part, image_part = call['messages'][0]['content']
    assert text_part['text'] == CRITIQUE_PROMPT
    assert image_part['image_url']['url'].startswith("data:image/png;base64,")


def test_provider_is_passed_through(fake_client):
    critic = SketchCritic(api_key="hf_test", provider="hf-inference")

    assert critic._client.kwargs['provider'] == "hf-inference"


def test_failure_falls_back(fake_client, monkeypatch, inked_png):
    monkeypatch.setattr(FakeClient, 'error', ConnectionError("offline"))
    critic = SketchCritic(api_key="hf_test")

    result = critic.critique(inked_png, async_mode=False)

    assert not result.success
    assert result.text == FALLBACK_MESSAGE
    assert "offline" in result.error


def test_empty_answer_falls_back(fake_client, monkeypatch, inked_png):
    monkeypatch.setattr(FakeClient, 'reply', "")
    result = SketchCritic(api_key="hf_test").critique(inked_png, async_mode=False)

    assert not result.success
    assert result.text == FALLBACK_MESSAGE


def test_async_critique_calls_back(fake_client, inked_png):
    critic = SketchCritic(api_key="hf_test")
    results = []
    critic.set_on_complete(results.append)

    assert critic.critique(inked_png) is None
    critic._thread.join(timeout=2.0)

    assert [r.text for r in results] == [FakeClient.reply]
    assert critic.get_last_result() is results[0]
    assert not critic.is_analyzing()


def test_cancelled_result_is_discarded(fake_client, monkeypatch, inked_png):
    gate = threading.Event()

    def blocking_completion(self, **kwargs):
        gate.wait(timeout=2.0)
        return completion("too late")

    monkeypatch.setattr(FakeClient, 'chat_completion', blocking_completion)
    critic = SketchCritic(api_key="hf_test")
    results = []
    critic.set_on_complete(results.append)

    critic.critique(inked_png)
    assert critic.is_analyzing()

    critic.cancel()
    gate.set()
    critic._thread.join(timeout=2.0)

    assert results == []
    assert critic.get_last_result() is None
    assert not critic.is_analyzing()


def test_second_request_while_busy(fake_client, monkeypatch, inked_png):
    gate = threading.Event()
    monkeypatch.setattr(
        FakeClient, 'chat_completion',
        lambda self, **kwargs: gate.wait(timeout=2.0) and completion("done")
    )
    critic = SketchCritic(api_key="hf_test")

    critic.critique(inked_png)
    busy = critic.critique(inked_png)
    gate.set()
    critic._thread.join(timeout=2.0)

    assert not busy.success
    assert busy.error == "Analysis already in progress"


def test_factory_without_token_uses_mock(monkeypatch):
    monkeypatch.delenv('HF_TOKEN', raising=False)
    monkeypatch.delenv('HF_API_KEY', raising=False)

    assert isinstance(create_critic(), MockSketchCritic)
    assert isinstance(create_critic(use_mock=True, api_key="hf_test"), MockSketchCritic)


def test_factory_reads_environment(fake_client, monkeypatch):
    monkeypatch.delenv('HF_TOKEN', raising=False)
    monkeypatch.setenv('HF_API_KEY', "hf_env")

    critic = create_critic()

    assert type(critic) is SketchCritic
    assert critic.api_key == "hf_env"
