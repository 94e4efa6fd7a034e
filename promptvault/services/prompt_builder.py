import re
from typing import Any, Dict

ALL_MODELS = "All"
TARGET_MODELS = ("Gemini", "ChatGPT", "Claude")
FALLBACK_TEXT = "Failed to generate prompt"

_MARKDOWN_CHARS = re.compile(r"[`*#]")


def build_instruction(prompt: str, target_model: str) -> str:
    """Build the instruction sent to the text-generation API.

    "All" asks for one labeled variant per model in TARGET_MODELS; any other
    value asks for a single variant tuned for that model.
    """
    if target_model == ALL_MODELS:
        labels = "\n".join(
            f"For {name}: [Your refined prompt for {name} here]" for name in TARGET_MODELS
        )
        return (
            f'You are an expert prompt engineer. A user wants to refine this prompt: "{prompt}".\n'
            f"Your task is to generate {len(TARGET_MODELS)} improved versions, "
            "one for each major AI model.\n"
            "Return ONLY the refined prompts, without any conversational text, "
            "explanations, or markdown formatting.\n"
            "Structure your response as a clean block of text, with each prompt "
            "clearly labeled. For example:\n"
            f"{labels}"
        )
    return (
        f'You are an expert prompt engineer. A user wants to refine this prompt: "{prompt}".\n'
        "Your task is to generate one single, highly effective version of this prompt "
        f"specifically for the {target_model} language model.\n"
        "Return ONLY the refined prompt text. Do not include any extra words, explanations, "
        "or markdown formatting like asterisks or hashtags."
    )


def build_payload(instruction: str) -> Dict[str, Any]:
    return {"contents": [{"parts": [{"text": instruction}]}]}


def extract_text(data: Any) -> str:
    """Return the first candidate's first text part, or FALLBACK_TEXT."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return FALLBACK_TEXT
    if not isinstance(text, str) or not text:
        return FALLBACK_TEXT
    return text


def clean_generated_text(text: str) -> str:
    """Strip backticks, asterisks and hashes, then surrounding whitespace."""
    return _MARKDOWN_CHARS.sub("", text or "").strip()
