"""Remote FPS estimation (Gemini REST or an OpenAI-compatible SDK).

The prompt is built from the hardware and the game's baseline and sent with
fixed sampling parameters. A reply ends up as a clamped integer, a
`SoftFallback` (use the local estimate) or a `ProviderHardError`.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Awaitable, Callable

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from adapters.http_client import build_async_client
from core.config import AppSettings, ProviderKind
from core.domain.errors import ProviderHardError, SoftFallback
from core.domain.models import GameFpsProfile, HardwareProfile
from core.domain.presets import Quality, Resolution
from core.interfaces.estimator import ExternalEstimator

logger = logging.getLogger(__name__)

TEMPERATURE = 0.4
TOP_P = 0.9
TOP_K = 40

MIN_PROVIDER_FPS = 10

_NON_DIGITS_RE = re.compile(r"\D")


def build_estimation_prompt(
    *,
    hardware: HardwareProfile,
    game_name: str,
    resolution: Resolution,
    quality: Quality,
    base_fps: int,
) -> str:
    return (
        "You are an FPS estimator. Given a PC and a game's known baseline FPS, estimate likely average FPS.\n"
        "\n"
        "Rules:\n"
        "- Return ONLY a number (integer). No text, no units.\n"
        "- Consider CPU, GPU, RAM. Assume modern drivers.\n"
        f"- Baseline FPS for {game_name} at {resolution.value} {quality.value} is ~{base_fps} FPS "
        "on a balanced mid-tier build.\n"
        "- If hardware is weaker, scale down; stronger, scale up. Stay realistic (no more than 2x baseline).\n"
        "- If info is missing, keep estimate conservative.\n"
        "\n"
        "System:\n"
        f"- CPU: {hardware.cpu or 'unknown'}\n"
        f"- GPU: {hardware.gpu or 'unknown'}\n"
        f"- RAM: {hardware.ram or 'unknown'}\n"
    )


def is_soft_status(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code <= 599


def raise_for_provider_status(status_code: int, body: str) -> None:
    """Translate a non-success provider status into the error taxonomy."""

    if 200 <= status_code < 300:
        return
    if is_soft_status(status_code):
        logger.warning("Estimation provider unavailable (HTTP %s); using local estimate", status_code)
        raise SoftFallback(f"provider_http_{status_code}", status_code=status_code)
    logger.error("Estimation provider error %s: %s", status_code, body)
    raise ProviderHardError(status_code, body)


def parse_fps_answer(text: str | None, *, base_fps: int) -> int:
    """Keep only the digits of the answer and clamp to `[10, 2 * base_fps]`."""

    digits = _NON_DIGITS_RE.sub("", text or "")
    if not digits:
        raise SoftFallback("unparseable_answer")
    try:
        value = int(digits)
    except ValueError as exc:
        # Longer than the interpreter's int string conversion limit.
        raise SoftFallback("unparseable_answer") from exc
    if value == 0:
        raise SoftFallback("zero_answer")
    return max(MIN_PROVIDER_FPS, min(value, base_fps * 2))


def _first_gemini_text(data: Any) -> str | None:
    try:
        part = data["candidates"][0]["content"]["parts"][0]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(part, dict):
        return None
    text = part.get("text")
    if not text:
        inline = part.get("inline_data")
        text = inline.get("data") if isinstance(inline, dict) else None
    return text if isinstance(text, str) else None


async def _bounded(call: Callable[[], Awaitable[str | None]], timeout_seconds: float) -> str | None:
    try:
        return await asyncio.wait_for(call(), timeout=timeout_seconds)
    except asyncio.TimeoutError as exc:
        logger.warning("Estimation provider timed out after %.1fs; using local estimate", timeout_seconds)
        raise SoftFallback("provider_timeout") from exc


class GeminiEstimationClient(ExternalEstimator):
    """Google Generative Language `generateContent` over httpx."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    def _endpoint(self) -> str:
        model = self._settings.ai_model.strip()
        if not model.startswith("models/"):
            model = f"models/{model}"
        return f"{self._settings.ai_base_url.rstrip('/')}/{model}:generateContent"

    def _request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": TEMPERATURE,
                "topP": TOP_P,
                "topK": TOP_K,
            },
        }

    async def _call(self, prompt: str) -> str | None:
        params = {}
        api_key = (self._settings.ai_api_key or "").strip()
        if api_key:
            params["key"] = api_key
        try:
            async with build_async_client(
                self._settings,
                extra_headers={"Content-Type": "application/json"},
                timeout_seconds=self._settings.ai_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self._endpoint(), params=params, json=self._request_body(prompt))
        except httpx.TransportError as exc:
            logger.warning("Estimation provider unreachable (%s); using local estimate", type(exc).__name__)
            raise SoftFallback(f"provider_transport:{type(exc).__name__}") from exc

        raise_for_provider_status(response.status_code, response.text)
        try:
            data = response.json()
        except ValueError as exc:
            raise SoftFallback("invalid_json") from exc
        return _first_gemini_text(data)

    async def estimate(
        self,
        *,
        hardware: HardwareProfile,
        game: GameFpsProfile,
        resolution: Resolution,
        quality: Quality,
        base_fps: int,
    ) -> int:
        prompt = build_estimation_prompt(
            hardware=hardware,
            game_name=game.name or "",
            resolution=resolution,
            quality=quality,
            base_fps=base_fps,
        )
        text = await _bounded(lambda: self._call(prompt), self._settings.ai_timeout_seconds)
        return parse_fps_answer(text, base_fps=base_fps)


class OpenAICompatibleEstimationClient(ExternalEstimator):
    """Any OpenAI-compatible chat-completions API (DeepSeek, Groq, OpenRouter, Ollama)."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            # Local OpenAI-compatible servers accept any key.
            api_key = (self._settings.ai_api_key or "").strip() or "local"
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=self._settings.ai_base_url,
                timeout=self._settings.ai_timeout_seconds,
                max_retries=0,
            )
        return self._client

    async def _call(self, prompt: str) -> str | None:
        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self._settings.ai_model,
                messages=[{"role": "user", "content": prompt}],
                temperature=TEMPERATURE,
                top_p=TOP_P,
                extra_body={"top_k": TOP_K},
            )
        except APIStatusError as exc:
            body = exc.response.text if exc.response is not None else str(exc)
            raise_for_provider_status(exc.status_code, body)
            raise
        except APIConnectionError as exc:
            # Includes APITimeoutError.
            logger.warning("Estimation provider unreachable (%s); using local estimate", type(exc).__name__)
            raise SoftFallback(f"provider_transport:{type(exc).__name__}") from exc

        if not response.choices:
            return None
        return response.choices[0].message.content

    async def estimate(
        self,
        *,
        hardware: HardwareProfile,
        game: GameFpsProfile,
        resolution: Resolution,
        quality: Quality,
        base_fps: int,
    ) -> int:
        prompt = build_estimation_prompt(
            hardware=hardware,
            game_name=game.name or "",
            resolution=resolution,
            quality=quality,
            base_fps=base_fps,
        )
        text = await _bounded(lambda: self._call(prompt), self._settings.ai_timeout_seconds)
        return parse_fps_answer(text, base_fps=base_fps)


def build_estimation_client(settings: AppSettings) -> ExternalEstimator | None:
    """Provider configured in `settings`, or None when only local estimates are possible."""

    if not settings.has_remote_provider():
        return None
    if settings.ai_provider is ProviderKind.OPENAI:
        return OpenAICompatibleEstimationClient(settings)
    return GeminiEstimationClient(settings)
