"""LangChain ChatAnthropic wrapper for roast / compliment generation."""

from __future__ import annotations

import logging
import re

from roastbot.config import settings
from roastbot.errors import GenerationError
from roastbot.llm.model_router import get_model_for_input
from roastbot.llm.prompts import (
    build_image_instruction,
    build_system_prompt,
    build_text_instruction,
)
from roastbot.meme.retry import RetryPolicy, policy_from_settings

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:(?P<media>image/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


def _is_transient(exc: BaseException) -> bool:
    import anthropic

    return isinstance(
        exc,
        (anthropic.APIConnectionError, anthropic.RateLimitError, anthropic.InternalServerError),
    )


def image_block(image_data: str) -> dict:
    """Anthropic image content block from a data URL or a remote URL."""
    match = _DATA_URL_RE.match(image_data)
    if match:
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": match.group("media"),
                "data": match.group("data"),
            },
        }
    if image_data.startswith(("http://", "https://")):
        return {"type": "image", "source": {"type": "url", "url": image_data}}
    raise GenerationError("Image data must be a base64 data URL or an http(s) URL")


def build_messages(
    content_type: str,
    input_type: str,
    text: str | None = None,
    image_data: str | None = None,
    severity: str = "medium",
    style: str = "sarcastic",
) -> list:
    from langchain_core.messages import HumanMessage, SystemMessage

    messages: list = [SystemMessage(content=build_system_prompt(content_type, severity, style))]

    if input_type == "image" and image_data:
        messages.append(HumanMessage(content=[
            {"type": "text", "text": build_image_instruction(content_type)},
            image_block(image_data),
        ]))
    elif input_type == "text" and text:
        messages.append(HumanMessage(content=build_text_instruction(content_type, text)))
    else:
        raise GenerationError("Invalid input configuration")

    return messages


def _build_llm(model_id: str):
    from langchain_anthropic import ChatAnthropic

    return ChatAnthropic(
        model=model_id,
        api_key=settings.anthropic_api_key,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
    )


def _response_text(content) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


async def generate_roast_or_compliment(
    content_type: str,
    input_type: str,
    text: str | None = None,
    image_data: str | None = None,
    severity: str = "medium",
    style: str = "sarcastic",
    retry_policy: RetryPolicy | None = None,
) -> str:
    """Generate the roast/compliment text. Raises GenerationError on any failure."""
    if not settings.anthropic_api_key:
        raise GenerationError("LLM not configured, set ANTHROPIC_API_KEY in .env")

    messages = build_messages(content_type, input_type, text, image_data, severity, style)
    model_id = get_model_for_input(input_type)
    llm = _build_llm(model_id)
    policy = (retry_policy or policy_from_settings(settings)).with_predicate(_is_transient)

    logger.info("Generating %s (%s input, %s/%s) with %s", content_type, input_type, severity, style, model_id)
    try:
        response = await policy.run(lambda: llm.ainvoke(messages), label="llm generation")
    except Exception as e:
        logger.error("LLM generation failed: %s", e)
        raise GenerationError(str(e) or "Provider call failed") from e

    generated = _response_text(response.content).strip()
    if not generated:
        raise GenerationError("No response generated")
    return generated
