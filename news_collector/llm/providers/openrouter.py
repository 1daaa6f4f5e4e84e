"""OpenRouter (OpenAI-compatible) chat-completion provider."""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from ...config import LoggingConfig, ProviderConfig
from ...core.types import ChatMessage, ChatResponse, ModelInfo
from ...errors import ConfigurationError, ProviderError
from ...logging_utils import log_event, redact_text, truncate_text
from .base import ChatProvider


class OpenRouterProvider(ChatProvider):
    """Chat provider speaking the OpenRouter `/api/v1` protocol.

    The bearer token is read through token_getter before every call so a
    token saved while the process runs is picked up by the next request.
    """

    def __init__(
        self,
        cfg: ProviderConfig,
        token_getter: Callable[[], str | None],
        log_cfg: LoggingConfig | None = None,
        llm_logger: logging.Logger | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.cfg = cfg
        self.token_getter = token_getter
        self.log_cfg = log_cfg or LoggingConfig()
        self.llm_logger = llm_logger
        self._transport = transport

    def chat(self, model_id: str, messages: list[ChatMessage]) -> ChatResponse:
        payload = {
            "model": model_id,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }
        prompt = "\n\n".join(m.content for m in messages)
        try:
            data = self._request("POST", "/api/v1/chat/completions", json=payload)
        except ProviderError as exc:
            self._log_llm_response(model_id, "provider_error", str(exc), prompt)
            raise
        response = ChatResponse(choices=_extract_choices(data))
        self._log_llm_response(model_id, "ok", response.first_content, prompt)
        return response

    def list_models(self) -> list[ModelInfo]:
        data = self._request("GET", "/api/v1/models")
        models = []
        items = data.get("data") or []
        if not isinstance(items, list):
            raise ProviderError(f"Expected a model list, got {type(items).__name__}")
        for item in items:
            if not isinstance(item, dict) or not item.get("id"):
                continue
            models.append(_parse_model(item))
        return models

    def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        token = self.cfg.api_key or self.token_getter()
        if not token:
            raise ConfigurationError("Missing OpenRouter bearer token")
        url = f"{self.cfg.base_url.rstrip('/')}{path}"
        headers = {"Authorization": f"Bearer {token}"}
        try:
            with httpx.Client(
                timeout=self.cfg.timeout_seconds,
                trust_env=self.cfg.trust_env,
                transport=self._transport,
            ) as client:
                resp = client.request(method, url, headers=headers, json=json)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"{method} {path} returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"{type(exc).__name__}: {exc}") from exc
        except (ValueError, RecursionError) as exc:
            raise ProviderError(f"Invalid JSON body from {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ProviderError(f"Expected a JSON object from {path}, got {type(data).__name__}")
        return data

    def _log_llm_response(self, model_id: str, status: str, content: str, prompt: str) -> None:
        if self.llm_logger is None:
            return
        detail = self.log_cfg.llm_log_detail
        redaction = self.log_cfg.llm_log_redaction
        payload = {
            "event": "llm_response",
            "status": status,
            "model": model_id,
        }
        if detail == "summary_only":
            payload["raw_response"] = ""
        elif detail == "prompt_response":
            payload["raw_prompt"] = truncate_text(redact_text(prompt, redaction))
            payload["raw_response"] = truncate_text(redact_text(content, redaction))
        else:
            payload["raw_response"] = truncate_text(redact_text(content, redaction))
        log_event(self.llm_logger, "LLM response", **payload)


def _extract_choices(data: dict[str, Any]) -> list[str]:
    raw = data.get("choices")
    if not isinstance(raw, list):
        return []
    choices = []
    for choice in raw:
        try:
            content = choice["message"]["content"]
        except (KeyError, TypeError):
            content = None
        choices.append(content if isinstance(content, str) else "")
    return choices


def _parse_model(item: dict[str, Any]) -> ModelInfo:
    architecture = _as_dict(item.get("architecture"))
    pricing = _as_dict(item.get("pricing"))
    return ModelInfo(
        id=str(item["id"]),
        name=str(item.get("name") or item["id"]),
        input_modalities=tuple(architecture.get("input_modalities") or ()),
        output_modalities=tuple(architecture.get("output_modalities") or ()),
        prompt_price=_price(pricing.get("prompt")),
        completion_price=_price(pricing.get("completion")),
    )


def _price(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}
