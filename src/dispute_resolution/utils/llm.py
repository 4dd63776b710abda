import re
from typing import Any

_FENCE_OPEN = re.compile(r"^```[a-zA-Z]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


def normalize_llm_content(content: Any) -> str | None:
    """
    Normalize LangChain LLM content into a plain string.

    LangChain may return:
    - str
    - list[str]
    - list[dict] (content blocks; only ``text`` blocks are kept)

    Returns None when the content carries no text at all.
    """
    if isinstance(content, str):
        return content

    if isinstance(content, list):
        parts: list[str] = []
        for item in content:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and item.get("type") == "text":
                parts.append(str(item.get("text", "")))
        if not parts:
            return None
        return "\n".join(parts)

    return None


def strip_code_fences(text: str) -> str:
    """
    Remove a surrounding ```json ... ``` or ``` ... ``` block, if present.
    """
    text = text.strip()
    if not text.startswith("```"):
        return text

    text = _FENCE_OPEN.sub("", text, count=1)
    text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()
