import pytest

from lwl.services.llm_service import LLMProviderError, LLMResult, LLMService


class StubProvider:
    def __init__(self, name: str, response: LLMResult | None = None, should_fail: bool = False):
        self.name = name
        self._response = response
        self.should_fail = should_fail
        self.recorded_messages = None
        self.recorded_kwargs = None

    def generate(self, messages, **kwargs):
        self.recorded_messages = list(messages)
        self.recorded_kwargs = kwargs
        if self.should_fail:
            raise LLMProviderError(f"{self.name} failure")
        return self._response


def _result(content: str) -> LLMResult:
    return LLMResult(
        provider="stub",
        model="test-model",
        content=content,
        prompt_tokens=10,
        completion_tokens=8,
        total_tokens=18,
        raw_response={"usage": {"prompt_tokens": 10, "completion_tokens": 8}},
    )


@pytest.fixture()
def sample_result() -> LLMResult:
    return _result("Hola")


def test_llm_service_prefers_primary_provider(sample_result):
    primary = StubProvider("openai", response=sample_result)
    fallback = StubProvider("anthropic", response=sample_result)

    service = LLMService(providers=[fallback, primary], primary="openai")
    result = service.generate_chat_completion(
        [{"role": "user", "content": "Traduce esto."}],
        system_prompt="You are a translator.",
    )

    assert result.content == "Hola"
    assert primary.recorded_messages[0]["role"] == "system"
    assert fallback.recorded_messages is None
    assert "temperature" in primary.recorded_kwargs


def test_system_prompt_passed_as_kwarg_to_anthropic(sample_result):
    provider = StubProvider("anthropic", response=sample_result)

    LLMService(providers=[provider]).generate_chat_completion(
        [{"role": "user", "content": "Hola"}],
        system_prompt="Be brief.",
        response_format={"type": "json_object"},
    )

    assert provider.recorded_kwargs["system"] == "Be brief."
    assert "response_format" not in provider.recorded_kwargs
    assert provider.recorded_messages == [{"role": "user", "content": "Hola"}]


def test_llm_service_falls_back_on_error():
    failing = StubProvider("openai", should_fail=True)
    fallback = StubProvider("anthropic", response=_result("Salut !"))

    service = LLMService(providers=[failing, fallback], primary="openai")
    result = service.generate_chat_completion([
        {"role": "user", "content": "Comment ça va ?"}
    ], temperature=0.2)

    assert result.content == "Salut !"
    assert fallback.recorded_kwargs["temperature"] == 0.2


def test_llm_service_raises_when_all_providers_fail():
    failing_primary = StubProvider("openai", should_fail=True)
    failing_secondary = StubProvider("anthropic", should_fail=True)

    service = LLMService(providers=[failing_primary, failing_secondary], primary="openai")

    with pytest.raises(LLMProviderError) as excinfo:
        service.generate_chat_completion([
            {"role": "user", "content": "Quel temps fait-il ?"}
        ])
    assert "openai" in str(excinfo.value)
    assert "anthropic" in str(excinfo.value)


def test_llm_service_requires_a_provider():
    with pytest.raises(ValueError):
        LLMService(providers=[])


def test_translate_sentence_parses_json():
    provider = StubProvider("openai", response=_result('{"normal": "I like cats", "literal": "To me please the cats"}'))

    translations = LLMService(providers=[provider]).translate_sentence("Me gustan los gatos", "spanish", "english")

    assert translations == {"normal": "I like cats", "literal": "To me please the cats"}
    assert provider.recorded_kwargs["response_format"] == {"type": "json_object"}


def test_translate_sentence_rejects_non_json():
    provider = StubProvider("openai", response=_result("not json"))

    with pytest.raises(LLMProviderError):
        LLMService(providers=[provider]).translate_sentence("Hola", "spanish", "english")
