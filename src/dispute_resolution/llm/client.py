import json
from functools import lru_cache
from typing import Protocol

from langchain_core.messages import HumanMessage, SystemMessage

from ..config import settings
from ..exceptions import GenerationFailure
from ..utils.llm import normalize_llm_content
from ..utils.logging import logger


class TextGenerator(Protocol):
    def generate(self, prompt: str, system_instruction: str) -> str:
        ...


def build_chat_model():
    """
    Build the LangChain chat model selected by LLM_PROVIDER.
    """
    if settings.LLM_PROVIDER == "anthropic":
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model=settings.ANTHROPIC_MODEL,
            api_key=settings.ANTHROPIC_API_KEY,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
        )

    from langchain_community.chat_models import ChatOllama

    return ChatOllama(
        base_url=settings.OLLAMA_BASE_URL,  # http://localhost:11434
        model=settings.LLM_MODEL,           # "gemma3:12b"
        temperature=settings.LLM_TEMPERATURE,
        num_ctx=32768,                      # Room for email + contract + ledger
        num_predict=settings.LLM_MAX_TOKENS,
    )


class ChatModelGenerator:
    """
    Single-attempt text generation over a LangChain chat model.
    No retries at this layer.
    """

    def __init__(self, chat_model) -> None:
        self._chat_model = chat_model

    def generate(self, prompt: str, system_instruction: str) -> str:
        messages = [
            SystemMessage(content=system_instruction),
            HumanMessage(content=prompt),
        ]

        try:
            response = self._chat_model.invoke(messages)
        except Exception as exc:
            logger.exception("LLM call failed")
            raise GenerationFailure(f"Text generation failed: {exc}") from exc

        text = normalize_llm_content(getattr(response, "content", None))
        if text is None:
            raise GenerationFailure("Unexpected non-text response from the language model")

        return text


# =================================================
# Offline mode
# =================================================

_CANNED_EXTRACTION = {
    "vendorName": "TechSupply Co.",
    "vendorEmail": "billing@techsupply.com",
    "invoiceNumbers": ["INV-2024-0004"],
    "amounts": [2000],
    "mainComplaint": (
        "The vendor reports an underpayment on invoice INV-2024-0004 for $2,000. "
        "No payment has been made and the early payment discount window has passed. "
        "They ask for the payment status and an expected payment date."
    ),
    "evidenceProvided": ["invoice number", "invoice and due dates", "payment terms reference"],
    "tone": "professional",
}

_CANNED_ANALYSIS = """1. SUMMARY:
The vendor reports that invoice INV-2024-0004 for $2,000 remains unpaid and asks which discounts apply. The invoice is still within a dispute window under Net 30 terms.

2. KEY FACTS:
- Invoice INV-2024-0004: $2,000, due 2025-01-14
- Ledger status: pending, no amount paid
- Early payment discount: 2% within 10 days, window has passed

3. CONTRACT REFERENCE:
Net 30 standard terms with a 2% early payment discount within 10 days and a 1.5% late fee.

4. ANALYSIS:
The ledger confirms the invoice is unpaid and past its due date. The discount window has closed, so the full invoice amount is owed. The claim is consistent with the contract and the payment history.

5. RECOMMENDATION: approve_payment

6. CONFIDENCE: high confidence

7. DRAFT RESPONSE:
Dear John,

Thank you for raising invoice INV-2024-0004. We have confirmed the invoice is valid and unpaid. Because the early payment window has passed, we will remit the full $2,000 within two business days.

Best regards,
Finance Team"""


class CannedGenerator:
    """
    Deterministic responses for demos without a model (LLM_PROVIDER=mock).
    """

    def generate(self, prompt: str, system_instruction: str) -> str:
        logger.info("MOCK MODE: returning canned response")
        if "JSON" in system_instruction:
            return json.dumps(_CANNED_EXTRACTION)
        return _CANNED_ANALYSIS


@lru_cache(maxsize=1)
def get_generator() -> TextGenerator:
    if settings.LLM_PROVIDER == "mock":
        return CannedGenerator()
    return ChatModelGenerator(build_chat_model())
