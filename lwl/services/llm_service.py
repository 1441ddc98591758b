"""Chat-completion client with provider fallback."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Protocol, Sequence

import httpx
from loguru import logger
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from lwl.config import settings


@dataclass
class LLMResult:
    """Completion text plus token usage reported by the provider."""

    provider: str
    model: str
    content: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    raw_response: Dict[str, Any]


class LLMProviderError(RuntimeError):
    """Raised when a provider returns an error response."""


class BaseLLMProvider(Protocol):
    name: str

    def generate(self, messages: Sequence[Dict[str, str]], **kwargs: Any) -> LLMResult:  # pragma: no cover - interface definition
        """Generate a chat completion."""


_provider_retry = retry(
    retry=retry_if_exception_type((httpx.TransportError, LLMProviderError)),
    stop=stop_after_attempt(settings.LLM_MAX_RETRIES),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    before_sleep=before_sleep_log(logger, "WARNING"),
    reraise=True,
)


@dataclass
class OpenAIProvider:
    """OpenAI-compatible ``/chat/completions`` endpoint."""

    api_key: str
    model: str
    base_url: str = "https://api.openai.com/v1"
    request_timeout: float = 30.0
    organization: Optional[str] = None

    name: str = "openai"

    def _build_headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.organization:
            headers["OpenAI-Organization"] = self.organization
        return headers

    @_provider_retry
    def generate(self, messages: Sequence[Dict[str, str]], **kwargs: Any) -> LLMResult:
        payload: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "messages": list(messages),
            "temperature": kwargs.get("temperature", 0.7),
        }
        if "response_format" in kwargs:
            payload["response_format"] = kwargs["response_format"]
        if "max_tokens" in kwargs:
            payload["max_tokens"] = kwargs["max_tokens"]

        with httpx.Client(base_url=self.base_url, timeout=self.request_timeout) as client:
            response = client.post("/chat/completions", json=payload, headers=self._build_headers())

        if response.status_code >= 400:
            logger.error("OpenAI returned error", status=response.status_code, body=response.text)
            raise LLMProviderError(f"OpenAI error {response.status_code}")

        data = response.json()
        choice = (data.get("choices") or [{}])[0]
        content = (choice.get("message") or {}).get("content")
        if not content:
            raise LLMProviderError("OpenAI response did not include content")

        usage = data.get("usage", {})
        prompt_tokens = usage.get("prompt_tokens", 0)
        completion_tokens = usage.get("completion_tokens", 0)
        result = LLMResult(
            provider=self.name,
            model=payload["model"],
            content=content.strip(),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=usage.get("total_tokens", prompt_tokens + completion_tokens),
            raw_response=data,
        )
        logger.info("OpenAI completion success", model=result.model, tokens=result.total_tokens)
        return result


@dataclass
class AnthropicProvider:
    """Anthropic ``/messages`` endpoint."""

    api_key: str
    model: str
    base_url: str = "https://api.anthropic.com/v1"
    request_timeout: float = 30.0

    name: str = "anthropic"

    API_VERSION: ClassVar[str] = "2023-06-01"

    @_provider_retry
    def generate(self, messages: Sequence[Dict[str, str]], **kwargs: Any) -> LLMResult:
        payload: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "max_tokens": kwargs.get("max_tokens", 512),
            "temperature": kwargs.get("temperature", 0.7),
            "messages": [
                {"role": message["role"], "content": message["content"]}
                for message in messages
            ],
        }
        if "system" in kwargs:
            payload["system"] = kwargs["system"]

        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": self.API_VERSION,
            "content-type": "application/json",
        }

        with httpx.Client(base_url=self.base_url, timeout=self.request_timeout) as client:
            response = client.post("/messages", json=payload, headers=headers)

        if response.status_code >= 400:
            logger.error("Anthropic returned error", status=response.status_code, body=response.text)
            raise LLMProviderError(f"Anthropic error {response.status_code}")

        data = response.json()
        chunks = [chunk.get("text", "") for chunk in data.get("content", []) if chunk.get("type") == "text"]
        content = "\n".join(filter(None, chunks)).strip()
        if not content:
            raise LLMProviderError("Anthropic response did not include content")

        usage = data.get("usage", {})
        prompt_tokens = usage.get("input_tokens", 0)
        completion_tokens = usage.get("output_tokens", 0)
        result = LLMResult(
            provider=self.name,
            model=payload["model"],
            content=content,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
            raw_response=data,
        )
        logger.info("Anthropic completion success", model=result.model, tokens=result.total_tokens)
        return result


class LLMService:
    """Send chat completions to the first provider that answers."""

    def __init__(
        self,
        providers: Optional[Sequence[BaseLLMProvider]] = None,
        primary: Optional[str] = None,
        secondary: Optional[str] = None,
    ) -> None:
        self._providers = list(providers) if providers is not None else self._build_default_providers()
        if not self._providers:
            raise ValueError("LLMService requires at least one provider")

        self._providers_by_name = {provider.name: provider for provider in self._providers}
        self._provider_order = self._build_order(
            primary or settings.PRIMARY_LLM_PROVIDER,
            secondary or settings.SECONDARY_LLM_PROVIDER,
        )

    def _build_default_providers(self) -> List[BaseLLMProvider]:
        provider_list: List[BaseLLMProvider] = []
        if settings.OPENAI_API_KEY:
            provider_list.append(
                OpenAIProvider(
                    api_key=settings.OPENAI_API_KEY,
                    model=settings.OPENAI_MODEL,
                    base_url=str(settings.OPENAI_API_BASE or "https://api.openai.com/v1"),
                    request_timeout=settings.LLM_REQUEST_TIMEOUT_SECONDS,
                    organization=settings.OPENAI_ORG_ID,
                )
            )
        if settings.ANTHROPIC_API_KEY:
            provider_list.append(
                AnthropicProvider(
                    api_key=settings.ANTHROPIC_API_KEY,
                    model=settings.ANTHROPIC_MODEL,
                    base_url=str(settings.ANTHROPIC_API_BASE or "https://api.anthropic.com/v1"),
                    request_timeout=settings.LLM_REQUEST_TIMEOUT_SECONDS,
                )
            )
        return provider_list

    def _build_order(self, primary: Optional[str], secondary: Optional[str]) -> List[BaseLLMProvider]:
        ordered: List[BaseLLMProvider] = []
        for name in (primary, secondary):
            provider = self._providers_by_name.get(name) if name else None
            if provider is not None and provider not in ordered:
                ordered.append(provider)
        ordered.extend(provider for provider in self._providers if provider not in ordered)
        return ordered

    def generate_chat_completion(
        self,
        messages: Sequence[Dict[str, str]],
        *,
        temperature: float = 0.7,
        max_tokens: int = 512,
        response_format: Optional[Dict[str, Any]] = None,
        system_prompt: Optional[str] = None,
    ) -> LLMResult:
        errors: List[str] = []
        for provider in self._provider_order:
            kwargs: Dict[str, Any] = {"temperature": temperature, "max_tokens": max_tokens}
            provider_messages = list(messages)
            if provider.name == "openai":
                if response_format:
                    kwargs["response_format"] = response_format
                if system_prompt:
                    provider_messages = [{"role": "system", "content": system_prompt}, *provider_messages]
            elif system_prompt:
                kwargs["system"] = system_prompt
            try:
                return provider.generate(provider_messages, **kwargs)
            except (LLMProviderError, httpx.HTTPError) as exc:
                logger.exception("LLM provider failure", provider=provider.name)
                errors.append(f"{provider.name}: {exc}")
        raise LLMProviderError("; ".join(errors))

    def translate_sentence(self, sentence: str, target_language: str, support_language: str) -> Dict[str, str]:
        """Return ``{"normal", "literal"}`` translations of a target-language sentence."""

        system_prompt = (
            f"You translate {target_language} sentences into {support_language} for language learners. "
            'Respond with JSON of the form {"normal": "...", "literal": "..."} where "normal" is a natural '
            'translation and "literal" follows the original word order word by word.'
        )
        result = self.generate_chat_completion(
            [{"role": "user", "content": sentence}],
            temperature=0.3,
            max_tokens=500,
            response_format={"type": "json_object"},
            system_prompt=system_prompt,
        )
        try:
            data = json.loads(result.content)
        except json.JSONDecodeError as exc:
            raise LLMProviderError("Translation response was not valid JSON") from exc
        return {
            "normal": str(data.get("normal") or ""),
            "literal": str(data.get("literal") or ""),
        }


__all__ = ["LLMService", "LLMResult", "LLMProviderError", "OpenAIProvider", "AnthropicProvider"]
