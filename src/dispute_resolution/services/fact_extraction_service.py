import json
from typing import Optional

from pydantic import ValidationError

from dispute_resolution.exceptions import ExtractionFailure
from dispute_resolution.llm.client import TextGenerator, get_generator
from dispute_resolution.llm.prompts import EXTRACTION_PROMPT, EXTRACTION_SYSTEM_PROMPT
from dispute_resolution.schemas import Email, ExtractedDisputeFacts
from dispute_resolution.utils.llm import strip_code_fences
from dispute_resolution.utils.logging import logger


# =================================================
# Helpers
# =================================================

def build_extraction_prompt(email: Email) -> str:
    return EXTRACTION_PROMPT.format(
        subject=email.subject,
        body=email.body,
    )


def parse_extraction_response(raw: str) -> ExtractedDisputeFacts:
    """
    Parse the model output into dispute facts.

    Fenced code blocks are stripped first. Malformed JSON or missing
    required keys raise ExtractionFailure with the raw text attached.
    Plausibility (negative amounts, odd invoice formats) is not checked.
    """
    text = strip_code_fences(raw)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ExtractionFailure(
            f"Extraction response is not valid JSON: {exc}", raw_text=raw
        ) from exc

    if not isinstance(data, dict):
        raise ExtractionFailure(
            "Extraction response is not a JSON object", raw_text=raw
        )

    try:
        return ExtractedDisputeFacts.model_validate(data)
    except ValidationError as exc:
        raise ExtractionFailure(
            f"Extraction response does not match the expected shape: {exc}",
            raw_text=raw,
        ) from exc


# =================================================
# Public API
# =================================================

def extract_facts(
    email: Email,
    *,
    generator: Optional[TextGenerator] = None,
) -> ExtractedDisputeFacts:
    """
    Extract structured dispute facts from an email.

    Guarantees:
    - exactly one generation call, never retried here
    - GenerationFailure and ExtractionFailure propagate to the caller
    """
    generator = generator or get_generator()

    logger.info(f"Running LLM fact extraction | Email={email.id} | From={email.sender}")

    raw = generator.generate(build_extraction_prompt(email), EXTRACTION_SYSTEM_PROMPT)

    try:
        facts = parse_extraction_response(raw)
    except ExtractionFailure:
        logger.error(f"Failed to parse fact extraction JSON for email {email.id}")
        logger.error(raw)
        raise

    logger.info(
        f"Extracted facts | Email={email.id} | "
        f"Invoices={facts.invoice_numbers} | Amounts={facts.amounts} | Tone={facts.tone.value}"
    )
    return facts
