"""Gemini calls for the shopping assistant, recommendations and try-on.

Requests are routed through LiteLLM with a ``gemini/<model>`` model string.
The API key is passed per call; it is resolved from the integration settings
row (or env) by the caller and never stored on this module.
"""

import base64
import time
from typing import Optional

import litellm
from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)

SHOP_ASSISTANT_PROMPT = """You are ReWeara's AI shopping assistant. ReWeara is a sustainable fashion e-commerce platform that sells both curated thrift finds and original eco-friendly designs.

Key information:
- We focus on sustainability and reducing fashion waste
- We offer both pre-loved thrift items and new sustainable originals
- Cash on delivery and UPI payments are available
- We ship across India
- 30-day return policy for original items, 15-day for thrift items

Please help customers with:
- Product recommendations based on their style preferences
- Information about sustainability and eco-fashion
- Shipping and return policies
- Size guidance
- Care instructions for thrift and sustainable items

Keep responses helpful, friendly, and focused on sustainable fashion."""

CHAT_FALLBACK_REPLY = (
    "Sorry, our style assistant is taking a break right now. "
    "Please try again in a few minutes or reach us through the contact page."
)


class GeminiError(Exception):
    """Gemini could not produce an answer."""


class GeminiResponse:
    """Text answer plus call metadata."""

    def __init__(self, content: str, model: str, latency_ms: int = 0):
        self.content = content
        self.model = model
        self.latency_ms = latency_ms


class GeminiClient:
    """Thin async wrapper over ``litellm.acompletion`` for Gemini models."""

    def __init__(self, api_key: str, model: Optional[str] = None):
        if not api_key:
            raise ValueError("Gemini API key is required")
        self.api_key = api_key
        self.model = model or get_settings().GEMINI_MODEL

    @property
    def litellm_model(self) -> str:
        return self.model if self.model.startswith("gemini/") else f"gemini/{self.model}"

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        image: Optional[bytes] = None,
        mime_type: str = "image/jpeg",
        max_tokens: int = 1024,
    ) -> GeminiResponse:
        """Run one completion. ``image`` is sent inline as base64."""
        if image is not None:
            encoded = base64.b64encode(image).decode("ascii")
            user_content = [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
                },
            ]
        else:
            user_content = prompt

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_content})

        start = time.monotonic()
        try:
            response = await litellm.acompletion(
                model=self.litellm_model,
                messages=messages,
                api_key=self.api_key,
                temperature=0.4,
                max_tokens=max_tokens,
                timeout=30,
            )
        except Exception as e:
            logger.error("Gemini call failed (%s): %s", self.model, e)
            raise GeminiError(str(e)) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        try:
            content = (response.choices[0].message.content or "").strip()
        except (AttributeError, IndexError, TypeError) as e:
            logger.error("Malformed Gemini response (%s): %s", self.model, e)
            raise GeminiError("Malformed response from Gemini") from e
        if not content:
            raise GeminiError("Empty response from Gemini")
        return GeminiResponse(content, self.model, latency_ms=elapsed_ms)

    # ------------------------------------------------------------------
    # Storefront prompts
    # ------------------------------------------------------------------

    async def chat(self, message: str, context: Optional[dict] = None) -> str:
        prompt = f"Customer message: {message}"
        if context:
            prompt += f"\nPrevious context: {context}"
        response = await self.generate(prompt, system_prompt=SHOP_ASSISTANT_PROMPT)
        return response.content

    async def rank_products(
        self, product_name: str, description: Optional[str], candidates: list[str]
    ) -> list[str]:
        """Ask Gemini to order ``candidates`` by similarity. Returns names."""
        prompt = (
            f'Based on the product "{product_name}" with description '
            f'"{description or ""}", recommend similar sustainable fashion items '
            f"from this list: {', '.join(candidates)}. Focus on sustainable fashion, "
            "eco-friendly materials, and style similarity. "
            "Return only product names separated by commas."
        )
        response = await self.generate(prompt, max_tokens=256)
        return [name.strip() for name in response.content.split(",") if name.strip()]

    async def describe_try_on(
        self,
        product_name: str,
        image: bytes,
        mime_type: str,
        prompt: Optional[str] = None,
    ) -> str:
        prompt = prompt or (
            f"Show the person in this photo wearing {product_name} in a realistic way "
            "for the sustainable fashion store ReWeara. Describe how the item would "
            "look on them, including fit, colour pairing and styling tips."
        )
        response = await self.generate(prompt, image=image, mime_type=mime_type)
        return response.content

    async def ping(self) -> str:
        response = await self.generate("Reply with the single word: ok", max_tokens=8)
        return response.content
