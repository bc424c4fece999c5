import httpx
import pytest

from habit_tracker.llm.gemini_client import GeminiClient, extract_text

URL = "https://gemini.test/v1beta/models/test:generateContent"


def _reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class Recorder:
    """Scripted transport: each item is a status code or an exception to raise."""

    def __init__(self, script):
        self.script = list(script)
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        step = self.script.pop(0)
        if isinstance(step, Exception):
            raise step
        if step == 200:
            return httpx.Response(200, json=_reply("Drink some water! 💧"))
        return httpx.Response(step, json={"error": {"code": step}})


def _client(script, api_key="test-key"):
    recorder = Recorder(script)
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    client = GeminiClient(
        api_key=api_key,
        url=URL,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(recorder)),
        sleep=fake_sleep,
    )
    return client, recorder, delays


@pytest.mark.asyncio
async def test_succeeds_on_third_attempt_after_two_backoffs():
    client, recorder, delays = _client([500, 500, 200])

    response = await client.send({"contents": []})

    assert response.status_code == 200
    assert recorder.calls == 3
    assert delays == [1, 2]


@pytest.mark.asyncio
async def test_returns_last_failure_without_raising():
    client, recorder, delays = _client([500, 503, 502])

    response = await client.send({"contents": []})

    assert response.status_code == 502
    assert recorder.calls == 3
    assert delays == [1, 2]


@pytest.mark.asyncio
async def test_rate_limit_is_retried():
    client, recorder, _ = _client([429, 200])
    response = await client.send({"contents": []})
    assert response.status_code == 200
    assert recorder.calls == 2


@pytest.mark.asyncio
async def test_client_errors_are_not_retried():
    client, recorder, delays = _client([400])

    response = await client.send({"contents": []})

    assert response.status_code == 400
    assert recorder.calls == 1
    assert delays == []


@pytest.mark.asyncio
async def test_network_error_reraised_after_final_attempt():
    boom = httpx.ConnectError("connection refused")
    client, recorder, delays = _client([boom, boom, boom])

    with pytest.raises(httpx.ConnectError):
        await client.send({"contents": []})
    assert recorder.calls == 3
    assert delays == [1, 2]


@pytest.mark.asyncio
async def test_network_error_then_success():
    client, recorder, delays = _client([httpx.ReadTimeout("slow"), 200])
    response = await client.send({"contents": []})
    assert response.status_code == 200
    assert delays == [1]


@pytest.mark.asyncio
async def test_generate_text_soft_failures():
    client, _, _ = _client([500, 500, 500])
    assert await client.generate_text("remind me") is None

    boom = httpx.ConnectError("down")
    client, _, _ = _client([boom, boom, boom])
    assert await client.generate_text("remind me") is None


@pytest.mark.asyncio
async def test_generate_text_disabled_without_key():
    client, recorder, _ = _client([200], api_key="")
    assert await client.generate_text("remind me") is None
    assert recorder.calls == 0


@pytest.mark.asyncio
async def test_generate_text_returns_candidate_text():
    client, _, _ = _client([200])
    assert await client.generate_text("remind me") == "Drink some water! 💧"


def test_extract_text_handles_malformed_bodies():
    assert extract_text({}) is None
    assert extract_text({"candidates": []}) is None
    assert extract_text({"candidates": [{"content": {"parts": [{"text": "  "}]}}]}) is None
    assert extract_text(None) is None
    assert extract_text(_reply("ok")) == "ok"
