import asyncio
import json
import unittest
from types import SimpleNamespace

import httpx
import openai

from adapters.fps_provider import (
    GeminiEstimationClient,
    OpenAICompatibleEstimationClient,
    build_estimation_client,
    build_estimation_prompt,
    parse_fps_answer,
)
from core.config import AppSettings, ProviderKind
from core.domain.errors import ProviderHardError, SoftFallback
from core.domain.models import GameFpsProfile, HardwareProfile
from core.domain.presets import Quality, Resolution

GAME = GameFpsProfile.model_validate(
    {"name": "Cyberpunk 2077", "fpsProfiles": {"1080p": {"low": 80, "medium": 60, "high": 45}}}
)
HARDWARE = HardwareProfile(cpu="Ryzen 7 7800X3D", gpu="RTX 4070", ram="32GB")


def _settings(**overrides) -> AppSettings:
    values = {"ai_api_key": "test-key", "ai_timeout_seconds": 5.0}
    values.update(overrides)
    return AppSettings(_env_file=None, **values)


def _gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _openai_reply(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeCompletions:
    def __init__(self, outcome) -> None:
        self.outcome = outcome
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _fake_openai(outcome) -> tuple[SimpleNamespace, FakeCompletions]:
    completions = FakeCompletions(outcome)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def _status_error(cls, status: int, body: str):
    request = httpx.Request("POST", "https://api.example.test/v1/chat/completions")
    response = httpx.Response(status, text=body, request=request)
    return cls(f"HTTP {status}", response=response, body=None)


class TestPrompt(unittest.TestCase):
    def test_prompt_mentions_baseline_and_rules(self):
        prompt = build_estimation_prompt(
            hardware=HardwareProfile(gpu="RTX 3060"),
            game_name="Elden Ring",
            resolution=Resolution.P1440,
            quality=Quality.ULTRA,
            base_fps=50,
        )
        self.assertIn("Baseline FPS for Elden Ring at 1440p ultra is ~50 FPS", prompt)
        self.assertIn("Return ONLY a number (integer)", prompt)
        self.assertIn("no more than 2x baseline", prompt)
        self.assertIn("keep estimate conservative", prompt)
        self.assertIn("- CPU: unknown", prompt)
        self.assertIn("- GPU: RTX 3060", prompt)
        self.assertIn("- RAM: unknown", prompt)

    def test_prompt_is_deterministic(self):
        kwargs = dict(hardware=HARDWARE, game_name="X", resolution=Resolution.P1080, quality=Quality.LOW, base_fps=60)
        self.assertEqual(build_estimation_prompt(**kwargs), build_estimation_prompt(**kwargs))


class TestParseFpsAnswer(unittest.TestCase):
    def test_strips_non_digits(self):
        self.assertEqual(parse_fps_answer(" ~72 FPS\n", base_fps=60), 72)

    def test_clamps_to_range(self):
        self.assertEqual(parse_fps_answer("500", base_fps=60), 120)
        self.assertEqual(parse_fps_answer("4", base_fps=60), 10)

    def test_unparseable_is_soft(self):
        for text in (None, "", "about sixty", "0", "fps: 0"):
            with self.subTest(text=text):
                with self.assertRaises(SoftFallback):
                    parse_fps_answer(text, base_fps=60)

    def test_overlong_number_is_soft(self):
        with self.assertRaises(SoftFallback) as ctx:
            parse_fps_answer("9" * 5000, base_fps=60)
        self.assertEqual(ctx.exception.reason, "unparseable_answer")


class TestGeminiEstimationClient(unittest.IsolatedAsyncioTestCase):
    async def _estimate(self, handler, **settings_overrides) -> int:
        client = GeminiEstimationClient(_settings(**settings_overrides), transport=httpx.MockTransport(handler))
        return await client.estimate(
            hardware=HARDWARE,
            game=GAME,
            resolution=Resolution.P1080,
            quality=Quality.MEDIUM,
            base_fps=60,
        )

    async def test_success_sends_fixed_generation_config(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_gemini_reply("84"))

        self.assertEqual(await self._estimate(handler), 84)

        request = seen[0]
        self.assertEqual(request.method, "POST")
        self.assertTrue(request.url.path.endswith("/models/gemini-1.5-flash:generateContent"))
        self.assertEqual(request.url.params["key"], "test-key")
        body = json.loads(request.content)
        self.assertEqual(body["generationConfig"], {"temperature": 0.4, "topP": 0.9, "topK": 40})
        self.assertIn("~60 FPS", body["contents"][0]["parts"][0]["text"])

    async def test_model_without_prefix(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_gemini_reply("70"))

        await self._estimate(handler, ai_model="gemini-2.0-flash")
        self.assertTrue(seen[0].url.path.endswith("/models/gemini-2.0-flash:generateContent"))

    async def test_answer_is_clamped(self):
        result = await self._estimate(lambda request: httpx.Response(200, json=_gemini_reply("999")))
        self.assertEqual(result, 120)

    async def test_rate_limit_and_server_errors_are_soft(self):
        for status in (429, 500, 502, 503, 599):
            with self.subTest(status=status):
                with self.assertRaises(SoftFallback) as ctx:
                    await self._estimate(lambda request, s=status: httpx.Response(s, text="busy"))
                self.assertEqual(ctx.exception.status_code, status)

    async def test_other_errors_are_hard(self):
        for status in (400, 401, 403, 404):
            with self.subTest(status=status):
                with self.assertRaises(ProviderHardError) as ctx:
                    await self._estimate(lambda request, s=status: httpx.Response(s, text='{"error": "nope"}'))
                self.assertEqual(ctx.exception.status_code, status)
                self.assertEqual(ctx.exception.detail, '{"error": "nope"}')

    async def test_missing_text_is_soft(self):
        with self.assertRaises(SoftFallback):
            await self._estimate(lambda request: httpx.Response(200, json={"candidates": []}))

    async def test_inline_data_is_read(self):
        reply = {"candidates": [{"content": {"parts": [{"inline_data": {"data": "77"}}]}}]}
        self.assertEqual(await self._estimate(lambda request: httpx.Response(200, json=reply)), 77)

    async def test_non_json_body_is_soft(self):
        with self.assertRaises(SoftFallback):
            await self._estimate(lambda request: httpx.Response(200, text="<html>"))

    async def test_connection_error_is_soft(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with self.assertRaises(SoftFallback):
            await self._estimate(handler)

    async def test_slow_provider_times_out_softly(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200, json=_gemini_reply("90"))

        with self.assertRaises(SoftFallback) as ctx:
            await self._estimate(handler, ai_timeout_seconds=0.05)
        self.assertEqual(ctx.exception.reason, "provider_timeout")


class TestOpenAICompatibleEstimationClient(unittest.IsolatedAsyncioTestCase):
    async def _estimate(self, fake_client) -> int:
        client = OpenAICompatibleEstimationClient(_settings(ai_model="deepseek-chat"), client=fake_client)
        return await client.estimate(
            hardware=HARDWARE,
            game=GAME,
            resolution=Resolution.P1080,
            quality=Quality.ULTRA,
            base_fps=45,
        )

    async def test_success_sends_fixed_sampling(self):
        fake, completions = _fake_openai(_openai_reply("52"))
        self.assertEqual(await self._estimate(fake), 52)

        call = completions.calls[0]
        self.assertEqual(call["model"], "deepseek-chat")
        self.assertEqual(call["temperature"], 0.4)
        self.assertEqual(call["top_p"], 0.9)
        self.assertEqual(call["extra_body"], {"top_k": 40})
        self.assertIn("~45 FPS", call["messages"][0]["content"])

    async def test_rate_limit_is_soft(self):
        fake, _ = _fake_openai(_status_error(openai.RateLimitError, 429, "slow down"))
        with self.assertRaises(SoftFallback):
            await self._estimate(fake)

    async def test_server_error_is_soft(self):
        fake, _ = _fake_openai(_status_error(openai.InternalServerError, 503, "down"))
        with self.assertRaises(SoftFallback):
            await self._estimate(fake)

    async def test_bad_request_is_hard(self):
        fake, _ = _fake_openai(_status_error(openai.BadRequestError, 400, "model not found"))
        with self.assertRaises(ProviderHardError) as ctx:
            await self._estimate(fake)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.detail, "model not found")

    async def test_connection_error_is_soft(self):
        request = httpx.Request("POST", "https://api.example.test/v1/chat/completions")
        fake, _ = _fake_openai(openai.APIConnectionError(request=request))
        with self.assertRaises(SoftFallback):
            await self._estimate(fake)

    async def test_empty_content_is_soft(self):
        fake, _ = _fake_openai(_openai_reply(None))
        with self.assertRaises(SoftFallback):
            await self._estimate(fake)


class TestBuildEstimationClient(unittest.TestCase):
    def test_no_key_means_local_only(self):
        self.assertIsNone(build_estimation_client(AppSettings(_env_file=None, ai_api_key=None)))
        self.assertIsNone(build_estimation_client(AppSettings(_env_file=None, ai_api_key="   ")))

    def test_provider_kind(self):
        gemini = build_estimation_client(_settings())
        self.assertIsInstance(gemini, GeminiEstimationClient)
        compat = build_estimation_client(_settings(ai_provider=ProviderKind.OPENAI))
        self.assertIsInstance(compat, OpenAICompatibleEstimationClient)

    def test_local_server_needs_no_key(self):
        settings = AppSettings(
            _env_file=None,
            ai_api_key=None,
            ai_provider=ProviderKind.OPENAI,
            ai_base_url="http://localhost:11434/v1",
        )
        self.assertIsInstance(build_estimation_client(settings), OpenAICompatibleEstimationClient)


if __name__ == "__main__":
    unittest.main()
