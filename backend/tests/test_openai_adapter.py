from types import SimpleNamespace

import httpx
import openai
import pytest
from conftest import assistant, user

from llama_chat.services.model_adapter import CompletionError
from llama_chat.services.openai_adapter import OpenAIAdapter, to_openai_messages


class _FakeCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def _client(completions: _FakeCompletions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def _response(content="Hi there", model="llama-3.3-70b-versatile"):
    return SimpleNamespace(
        model=model,
        choices=[SimpleNamespace(message=SimpleNamespace(content=content, role="assistant"))],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=3, total_tokens=15),
    )


def test_system_prompt_comes_first():
    result = to_openai_messages([user("hello"), assistant("hi")], "You are a helpful assistant.")
    assert result == [
        {"role": "system", "content": "You are a helpful assistant."},
        {"role": "user", "content": "hello"},
        {"role": "assistant", "content": "hi"},
    ]


def test_name_is_not_sent():
    message = user("hello").model_copy(update={"name": "alice"})
    assert to_openai_messages([message]) == [{"role": "user", "content": "hello"}]


@pytest.mark.asyncio
async def test_chat_completion_request_and_result():
    completions = _FakeCompletions(response=_response())
    adapter = OpenAIAdapter("key", client=_client(completions))

    result = await adapter.chat_completion(
        messages=[user("hello")],
        model="llama-3.3-70b-versatile",
        temperature=0.7,
        max_tokens=1024,
        top_p=1.0,
        system_prompt="You are a helpful assistant."
    )

    assert result.content == "Hi there"
    assert result.model == "llama-3.3-70b-versatile"
    assert result.usage == {"prompt_tokens": 12, "completion_tokens": 3, "total_tokens": 15}

    request = completions.requests[0]
    assert request["stream"] is False
    assert request["max_tokens"] == 1024
    assert request["top_p"] == 1.0
    assert request["messages"][0]["role"] == "system"


@pytest.mark.asyncio
async def test_null_content_becomes_empty_reply():
    adapter = OpenAIAdapter("key", client=_client(_FakeCompletions(response=_response(content=None))))
    result = await adapter.chat_completion(messages=[user("hello")], model="m")
    assert result.content == ""


@pytest.mark.asyncio
async def test_missing_api_key_fails_without_request():
    completions = _FakeCompletions(response=_response())
    adapter = OpenAIAdapter("", client=_client(completions))

    with pytest.raises(CompletionError):
        await adapter.chat_completion(messages=[user("hello")], model="m")
    assert completions.requests == []


@pytest.mark.asyncio
async def test_sdk_error_becomes_completion_error():
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    error = openai.APIConnectionError(request=request)
    adapter = OpenAIAdapter("key", client=_client(_FakeCompletions(error=error)))

    with pytest.raises(CompletionError):
        await adapter.chat_completion(messages=[user("hello")], model="m")


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    SimpleNamespace(model="m", choices=[], usage=None),
    SimpleNamespace(model="m", usage=None),
    SimpleNamespace(model="m", choices=[SimpleNamespace(message=SimpleNamespace(content=["x"]))], usage=None),
    None,
])
async def test_malformed_response_becomes_completion_error(response):
    adapter = OpenAIAdapter("key", client=_client(_FakeCompletions(response=response)))

    with pytest.raises(CompletionError):
        await adapter.chat_completion(messages=[user("hello")], model="m")


def test_model_catalog():
    adapter = OpenAIAdapter("key", client=_client(_FakeCompletions()))
    assert adapter.validate_model("llama-3.3-70b-versatile")
    assert not adapter.validate_model("gpt-2")


@pytest.mark.asyncio
async def test_partial_usage_is_accepted():
    response = _response()
    response.usage = SimpleNamespace(prompt_tokens=12, completion_tokens=None)
    adapter = OpenAIAdapter("key", client=_client(_FakeCompletions(response=response)))

    result = await adapter.chat_completion(messages=[user("hello")], model="m")

    assert result.content == "Hi there"
    assert result.usage == {"prompt_tokens": 12, "completion_tokens": None, "total_tokens": None}
