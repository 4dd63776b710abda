from typing import Optional

from dispute_resolution.config import settings
from dispute_resolution.exceptions import InvalidSubmission, VendorResolutionFailure
from dispute_resolution.llm.client import TextGenerator
from dispute_resolution.reference.vendors import get_contract_by_vendor_id, get_vendor_by_id
from dispute_resolution.schemas import (
    Contract,
    Email,
    PipelineResult,
    SubmissionResult,
    Vendor,
)
from dispute_resolution.services.analysis_service import analyze_dispute
from dispute_resolution.services.case_service import create_resolution_case
from dispute_resolution.services.context_service import (
    format_contract_context,
    format_payment_history,
    format_vendor_context,
)
from dispute_resolution.services.fact_extraction_service import extract_facts
from dispute_resolution.services.knowledge_service import KnowledgeSearch
from dispute_resolution.utils.identifiers import generate_email_id
from dispute_resolution.utils.logging import logger


def process_email(
    *,
    email: Email,
    vendor_context: str,
    contract_context: str,
    payment_history: str,
    generator: Optional[TextGenerator] = None,
    search: Optional[KnowledgeSearch] = None,
) -> PipelineResult:
    """
    End-to-end pipeline for one email.

    Steps:
    1. fact extraction
    2. merits analysis (knowledge base or local contract)
    3. case assembly

    ExtractionFailure and GenerationFailure propagate unchanged.
    """
    logger.info(f"Starting email processing | Email={email.id}")

    # =================================================
    # 1. FACT EXTRACTION
    # =================================================
    facts = extract_facts(email, generator=generator)

    # =================================================
    # 2. ANALYSIS
    # =================================================
    analysis = analyze_dispute(
        email=email,
        facts=facts,
        vendor_context=vendor_context,
        contract_context=contract_context,
        payment_history=payment_history,
        generator=generator,
        search=search,
    )

    # =================================================
    # 3. CASE ASSEMBLY
    # =================================================
    result = create_resolution_case(email=email, facts=facts, analysis=analysis)

    logger.info(f"Email processing completed | Case={analysis.case_id}")
    return result


def process_vendor_email(
    *,
    email: Email,
    vendor: Vendor,
    contract: Contract,
    generator: Optional[TextGenerator] = None,
    search: Optional[KnowledgeSearch] = None,
) -> PipelineResult:
    """
    Format local context for a resolved vendor and run the pipeline.
    """
    return process_email(
        email=email,
        vendor_context=format_vendor_context(vendor),
        contract_context=format_contract_context(contract),
        payment_history=format_payment_history(vendor.id),
        generator=generator,
        search=search,
    )


def submit_dispute(
    *,
    vendor_id: str,
    subject: str,
    body: str,
    generator: Optional[TextGenerator] = None,
    search: Optional[KnowledgeSearch] = None,
) -> SubmissionResult:
    """
    Manual submission: build a synthetic email from the vendor's own address
    and run the pipeline synchronously.

    Raises InvalidSubmission / VendorResolutionFailure for caller faults and
    lets ExtractionFailure / GenerationFailure through for downstream faults.
    """
    if not vendor_id or not subject or not body:
        raise InvalidSubmission("Missing required fields: vendorId, subject, body")

    logger.info(f"Received email analysis request | Vendor={vendor_id} | Subject={subject[:60]}")

    vendor = get_vendor_by_id(vendor_id)
    if not vendor:
        raise VendorResolutionFailure(f"Vendor not found: {vendor_id}")

    contract = get_contract_by_vendor_id(vendor_id)
    if not contract:
        raise VendorResolutionFailure(f"No contract found for vendor: {vendor_id}")

    email = Email(
        id=generate_email_id(),
        sender=vendor.email,
        recipient=settings.FINANCE_EMAIL_ADDRESS,
        subject=subject,
        body=body,
        vendor_id=vendor.id,
    )

    result = process_vendor_email(
        email=email,
        vendor=vendor,
        contract=contract,
        generator=generator,
        search=search,
    )

    analysis = result.resolution_case.analysis
    return SubmissionResult(
        case_id=analysis.case_id,
        vendor_name=vendor.name,
        recommendation=analysis.recommended_action,
        confidence=analysis.confidence,
        reasoning=analysis.reasoning,
        required_approvals=analysis.required_approvals,
        draft_response=analysis.draft_response,
        full_analysis=result.email_analysis,
        case_data=result.resolution_case,
    )
