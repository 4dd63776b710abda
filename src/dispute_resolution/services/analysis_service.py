from typing import Optional

from dispute_resolution.llm.client import TextGenerator, get_generator
from dispute_resolution.llm.prompts import (
    ANALYSIS_PROMPT,
    ANALYSIS_SYSTEM_PROMPT,
    KNOWLEDGE_BASE_CONTRACT_SECTION,
    LOCAL_CONTRACT_SECTION,
)
from dispute_resolution.schemas import (
    DisputeAnalysis,
    Email,
    ExtractedDisputeFacts,
    KnowledgeBundle,
)
from dispute_resolution.services.classification_service import (
    extract_confidence,
    extract_draft_response,
    extract_reasoning,
    extract_recommendation,
    required_approvals,
)
from dispute_resolution.services.knowledge_service import (
    KnowledgeSearch,
    query_contract_by_invoice,
)
from dispute_resolution.utils.identifiers import generate_case_id
from dispute_resolution.utils.logging import logger


# --------------------------------------------------
# Prompt assembly
# --------------------------------------------------

def _format_amounts(amounts: list[float]) -> str:
    if not amounts:
        return "None stated"
    return ", ".join(f"${amount:,.2f}" for amount in amounts)


def format_knowledge_bundle(bundle: KnowledgeBundle) -> str:
    return KNOWLEDGE_BASE_CONTRACT_SECTION.format(
        contract_number=bundle.contract_number,
        vendor_name=bundle.vendor_name,
        effective_date=bundle.effective_date,
        expiration_date=bundle.expiration_date,
        payment_terms=bundle.payment_terms,
        service_description=bundle.service_description,
        dispute_resolution=bundle.dispute_resolution,
        special_clauses="\n".join(f"- {clause}" for clause in bundle.special_clauses),
        raw_context=bundle.raw_context,
    )


def build_analysis_prompt(
    *,
    email: Email,
    facts: ExtractedDisputeFacts,
    vendor_context: str,
    contract_context: str,
    payment_history: str,
    knowledge: Optional[KnowledgeBundle] = None,
) -> str:
    """
    A retrieved knowledge bundle replaces the local contract text.
    Vendor context and payment history always come from local data.
    """
    if knowledge is not None:
        contract_section = format_knowledge_bundle(knowledge)
    else:
        contract_section = LOCAL_CONTRACT_SECTION.format(contract_context=contract_context)

    return ANALYSIS_PROMPT.format(
        sender=email.sender,
        subject=email.subject,
        body=email.body,
        vendor_name=facts.vendor_name,
        invoice_numbers=", ".join(facts.invoice_numbers) or "None stated",
        amounts=_format_amounts(facts.amounts),
        main_complaint=facts.main_complaint,
        evidence=", ".join(facts.evidence_provided) or "None stated",
        tone=facts.tone.value,
        vendor_context=vendor_context,
        contract_section=contract_section,
        payment_history=payment_history,
    )


# --------------------------------------------------
# Public API
# --------------------------------------------------

def analyze_dispute(
    *,
    email: Email,
    facts: ExtractedDisputeFacts,
    vendor_context: str,
    contract_context: str,
    payment_history: str,
    generator: Optional[TextGenerator] = None,
    search: Optional[KnowledgeSearch] = None,
) -> DisputeAnalysis:
    """
    Run the merits analysis for one dispute email.

    The knowledge base is only consulted when the extraction found an
    invoice number; the first one is used as the lookup key.
    """
    generator = generator or get_generator()

    logger.info(f"Analyzing dispute | Email={email.id}")

    knowledge: Optional[KnowledgeBundle] = None
    if facts.invoice_numbers:
        knowledge = query_contract_by_invoice(
            facts.invoice_numbers[0],
            email.sender,
            search=search,
        )
        if knowledge is None:
            logger.warning(
                f"No knowledge base contract for invoice {facts.invoice_numbers[0]}, "
                f"falling back to local contract data"
            )

    prompt = build_analysis_prompt(
        email=email,
        facts=facts,
        vendor_context=vendor_context,
        contract_context=contract_context,
        payment_history=payment_history,
        knowledge=knowledge,
    )

    narrative = generator.generate(prompt, ANALYSIS_SYSTEM_PROMPT)
    case_id = generate_case_id()

    recommendation = extract_recommendation(narrative)

    analysis = DisputeAnalysis(
        case_id=case_id,
        vendor_id=email.vendor_id,
        initial_analysis=narrative,
        confidence=extract_confidence(narrative),
        recommended_action=recommendation,
        reasoning=extract_reasoning(narrative),
        draft_response=extract_draft_response(narrative),
        required_approvals=required_approvals(recommendation),
        knowledge_base_used=knowledge is not None,
    )

    logger.info(
        f"Dispute analysis completed | Case={case_id} | "
        f"Recommendation={recommendation.value} | Confidence={analysis.confidence.value}"
    )
    return analysis
