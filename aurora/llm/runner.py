"""Adapter around an OpenAI-compatible hosted model API."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Callable, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

_AUTO_API_KEY = object()


@dataclass
class LLMRequest:
    """Represents a chat completion request."""

    prompt: str
    system: Optional[str]
    model: str
    temperature: Optional[float]
    max_tokens: Optional[int]
    base_url: str
    api_key: Optional[str]
    request_timeout: Optional[float]


@dataclass
class ImageRequest:
    """Represents an image generation request."""

    prompt: str
    model: str
    size: str
    base_url: str
    api_key: Optional[str]
    request_timeout: Optional[float]


class LLMRunner:
    """Executes prompts against the configured hosted model endpoints."""

    DEFAULT_MODEL = "gemini-2.0-flash"
    DEFAULT_IMAGE_MODEL = "imagen-3.0-generate-002"
    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai"
    DEFAULT_IMAGE_SIZE = "1024x1024"
    ENV_MODEL_KEYS = ("AURORA_LLM_MODEL", "OPENAI_MODEL")
    ENV_IMAGE_MODEL_KEYS = ("AURORA_LLM_IMAGE_MODEL", "OPENAI_IMAGE_MODEL")
    ENV_BASE_URL_KEYS = ("AURORA_LLM_BASE_URL", "OPENAI_BASE_URL")
    ENV_API_KEY_KEYS = (
        "AURORA_LLM_API_KEY",
        "GEMINI_API_KEY",
        "GOOGLE_API_KEY",
        "OPENAI_API_KEY",
    )

    def __init__(
        self,
        model: str | None = None,
        *,
        image_model: str | None = None,
        base_url: str | None = None,
        temperature: Optional[float] = 0.7,
        max_tokens: Optional[int] = None,
        api_key: str | None | object = _AUTO_API_KEY,
        request_timeout: Optional[float] = 60.0,
        runner: Callable[[LLMRequest], str] | None = None,
        image_runner: Callable[[ImageRequest], str] | None = None,
    ) -> None:
        self.model = model or self._first_env_value(self.ENV_MODEL_KEYS) or self.DEFAULT_MODEL
        self.image_model = (
            image_model
            or self._first_env_value(self.ENV_IMAGE_MODEL_KEYS)
            or self.DEFAULT_IMAGE_MODEL
        )
        self.base_url = self._normalize_base_url(
            base_url or self._first_env_value(self.ENV_BASE_URL_KEYS) or self.DEFAULT_BASE_URL
        )
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.api_key = self._resolve_api_key(api_key)
        self.request_timeout = request_timeout
        self._runner = runner or self._http_runner
        self._image_runner = image_runner or self._http_image_runner

    def run(self, prompt: str, *, system: str | None = None) -> str:
        """Send the prompt to the configured model and return the response text."""
        request = LLMRequest(
            prompt=prompt,
            system=system,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            base_url=self.base_url,
            api_key=self.api_key,
            request_timeout=self.request_timeout,
        )
        return self._runner(request)

    def generate_image(self, prompt: str, *, size: str | None = None) -> str:
        """Generate an image and return it as a ``data:<mime>;base64,<data>`` URI."""
        request = ImageRequest(
            prompt=prompt,
            model=self.image_model,
            size=size or self.DEFAULT_IMAGE_SIZE,
            base_url=self.base_url,
            api_key=self.api_key,
            request_timeout=self.request_timeout,
        )
        return self._image_runner(request)

    @staticmethod
    def _normalize_base_url(url: str) -> str:
        return url.rstrip("/")

    @staticmethod
    def _http_runner(request: LLMRequest) -> str:
        payload: dict[str, object] = {
            "model": request.model,
            "messages": LLMRunner._build_messages(request.system, request.prompt),
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens

        response_payload = LLMRunner._post_json(
            f"{request.base_url}/chat/completions",
            payload,
            api_key=request.api_key,
            timeout=request.request_timeout,
        )
        content = LLMRunner._extract_content(response_payload)
        if not content:
            raise RuntimeError("LLM HTTP runner returned an empty response")
        return content.strip()

    @staticmethod
    def _http_image_runner(request: ImageRequest) -> str:
        payload: dict[str, object] = {
            "model": request.model,
            "prompt": request.prompt,
            "n": 1,
            "size": request.size,
            "response_format": "b64_json",
        }
        response_payload = LLMRunner._post_json(
            f"{request.base_url}/images/generations",
            payload,
            api_key=request.api_key,
            timeout=request.request_timeout,
        )
        data_uri = LLMRunner._extract_image(response_payload)
        if not data_uri:
            raise RuntimeError("Image generation failed to produce a result.")
        return data_uri

    @staticmethod
    def _post_json(
        endpoint: str,
        payload: dict[str, object],
        *,
        api_key: str | None,
        timeout: float | None,
    ) -> dict[str, object]:
        data = json.dumps(payload).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        http_request = Request(endpoint, data=data, headers=headers, method="POST")

        try:
            with urlopen(http_request, timeout=timeout or 60.0) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:  # pragma: no cover - depends on runtime
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise RuntimeError(
                f"LLM HTTP runner failed with status {exc.code}: {message}"
            ) from exc
        except URLError as exc:  # pragma: no cover - depends on runtime
            raise RuntimeError(f"LLM HTTP runner failed: {exc.reason}") from exc

        try:
            response_payload = json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise RuntimeError("LLM HTTP runner returned invalid JSON") from exc
        if not isinstance(response_payload, dict):
            raise RuntimeError("LLM HTTP runner returned an unexpected payload")
        return response_payload

    @staticmethod
    def _build_messages(system: str | None, prompt: str) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def _extract_content(payload: dict[str, object]) -> str:
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        text = first.get("text")
        if isinstance(text, str):
            return text
        return ""

    @staticmethod
    def _extract_image(payload: dict[str, object]) -> str:
        items = payload.get("data")
        if not isinstance(items, list) or not items:
            return ""
        first = items[0]
        if not isinstance(first, dict):
            return ""
        encoded = first.get("b64_json")
        if isinstance(encoded, str) and encoded:
            mime = first.get("mime_type")
            if not isinstance(mime, str) or not mime:
                mime = "image/png"
            return f"data:{mime};base64,{encoded}"
        url = first.get("url")
        if isinstance(url, str) and url.startswith("data:"):
            return url
        return ""

    def _resolve_api_key(self, api_key: str | None | object) -> str | None:
        if api_key is _AUTO_API_KEY:
            return self._first_env_value(self.ENV_API_KEY_KEYS)
        return api_key  # type: ignore[return-value]

    @staticmethod
    def _first_env_value(keys: Sequence[str]) -> str | None:
        for key in keys:
            value = os.getenv(key)
            if value:
                return value
        return None


__all__ = ["ImageRequest", "LLMRequest", "LLMRunner"]
