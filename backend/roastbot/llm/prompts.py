"""Prompt building for roast / compliment generation."""

from __future__ import annotations

SYSTEM_PROMPT = """You are RoastBot, an AI specialized in generating creative roasts and compliments. Your responses should be:
1. Clever and witty
2. Personalized to the input
3. Never generic
4. Avoiding harmful stereotypes or truly offensive content
5. Using creative language and metaphors
6. Maintaining a playful tone even in roasts"""

SEVERITY_MODIFIERS = {
    "mild": "Keep it very light and playful.",
    "medium": "Be moderately edgy but not too harsh.",
    "nuclear": "Go all out but stay within ethical bounds.",
}

STYLE_MODIFIERS = {
    "formal": "Use sophisticated, formal language.",
    "sarcastic": "Be extremely sarcastic and ironic.",
    "shakespearean": "Write in Shakespearean style with thee/thou/thy.",
    "rapBattle": "Write in rap battle style with rhymes.",
}


def build_system_prompt(content_type: str, severity: str = "medium", style: str = "sarcastic") -> str:
    return "\n".join([
        SYSTEM_PROMPT,
        f"Generate a {content_type} that is:",
        SEVERITY_MODIFIERS[severity],
        STYLE_MODIFIERS[style],
    ])


def _verb(content_type: str) -> str:
    return "roast" if content_type == "roast" else "compliment"


def build_text_instruction(content_type: str, text: str) -> str:
    return f"Please {_verb(content_type)} me based on this description: {text}"


def build_image_instruction(content_type: str) -> str:
    return (
        f"Please {_verb(content_type)} the person in this image. "
        "Focus on visible features and the overall vibe of the image."
    )


def get_all_prompts() -> dict[str, str]:
    """Prompt fragments, for the /api/prompts debug endpoint."""
    prompts = {"system": SYSTEM_PROMPT}
    prompts.update({f"severity.{k}": v for k, v in SEVERITY_MODIFIERS.items()})
    prompts.update({f"style.{k}": v for k, v in STYLE_MODIFIERS.items()})
    return prompts
