"""Input type → model selection. Cheap model for text, vision-capable tier for selfies."""

from __future__ import annotations

from roastbot.config import settings

_INPUT_MODEL_MAP = {
    "text": "text",
    "image": "vision",
}


def get_model_for_input(input_type: str) -> str:
    tier = _INPUT_MODEL_MAP.get(input_type, "text")
    if tier == "vision":
        return settings.model_vision
    return settings.model_text
