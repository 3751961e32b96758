"""Unit tests for the Gemini client's response handling."""

from types import SimpleNamespace

import pytest

from services.storefront_service.integrations import gemini
from services.storefront_service.integrations.gemini import GeminiClient, GeminiError


def _completion(*choices):
    return SimpleNamespace(choices=list(choices))


def _choice(content):
    return SimpleNamespace(message=SimpleNamespace(content=content))


@pytest.fixture
def fake_completion(monkeypatch):
    """Replace litellm.acompletion with a canned response."""

    def _install(response):
        async def acompletion(**kwargs):
            return response

        monkeypatch.setattr(gemini.litellm, "acompletion", acompletion)

    return _install


@pytest.mark.asyncio
@pytest.mark.unit
async def test_generate_returns_stripped_content(fake_completion):
    fake_completion(_completion(_choice("  Try the linen kurta.  ")))

    response = await GeminiClient("test-key", model="gemini-2.0-flash").generate("hi")

    assert response.content == "Try the linen kurta."
    assert response.model == "gemini-2.0-flash"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_response_without_choices_raises_gemini_error(fake_completion):
    fake_completion(_completion())

    with pytest.raises(GeminiError):
        await GeminiClient("test-key").generate("hi")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_empty_content_raises_gemini_error(fake_completion):
    fake_completion(_completion(_choice(None)))

    with pytest.raises(GeminiError):
        await GeminiClient("test-key").chat("hello")


@pytest.mark.unit
def test_model_name_is_routed_through_gemini_provider():
    assert GeminiClient("k", model="gemini-2.0-flash").litellm_model == "gemini/gemini-2.0-flash"
    assert GeminiClient("k", model="gemini/gemini-pro").litellm_model == "gemini/gemini-pro"
