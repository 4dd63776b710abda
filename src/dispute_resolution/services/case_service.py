# src/dispute_resolution/services/case_service.py

import uuid
from datetime import datetime, timezone

from dispute_resolution.schemas import (
    CaseStatus,
    Dispute,
    DisputeAnalysis,
    DisputeStatus,
    Email,
    ExtractedDisputeFacts,
    PipelineResult,
    ResolutionCase,
)
from dispute_resolution.services.classification_service import determine_dispute_type
from dispute_resolution.utils.logging import logger

CASE_CREATOR = "email-analysis-agent"
UNKNOWN_INVOICE = "UNKNOWN"
DEFAULT_CURRENCY = "USD"


# -------------------------
# Create
# -------------------------

def build_dispute(
    *,
    email: Email,
    facts: ExtractedDisputeFacts,
    analysis: DisputeAnalysis,
) -> Dispute:
    """
    Amount and invoice come from extraction only: first value or a sentinel.
    """
    now = datetime.now(timezone.utc)
    return Dispute(
        id=str(uuid.uuid4()),
        case_id=analysis.case_id,
        vendor_id=email.vendor_id,
        vendor_name=facts.vendor_name,
        dispute_type=determine_dispute_type(facts.main_complaint),
        amount=facts.amounts[0] if facts.amounts else 0,
        currency=DEFAULT_CURRENCY,
        invoice_number=facts.invoice_numbers[0] if facts.invoice_numbers else UNKNOWN_INVOICE,
        status=DisputeStatus.IN_ANALYSIS,
        created_at=now,
        updated_at=now,
    )


def create_resolution_case(
    *,
    email: Email,
    facts: ExtractedDisputeFacts,
    analysis: DisputeAnalysis,
) -> PipelineResult:
    logger.info(f"Creating resolution case {analysis.case_id}")

    dispute = build_dispute(email=email, facts=facts, analysis=analysis)

    case = ResolutionCase(
        id=str(uuid.uuid4()),
        dispute_id=dispute.id,
        vendor_id=email.vendor_id,
        analysis=analysis,
        status=CaseStatus.DRAFTED,
        created_by=CASE_CREATOR,
        notes=f"Case created from email: {email.subject}",
    )

    logger.info(
        f"Resolution case created | Case={analysis.case_id} | "
        f"Type={dispute.dispute_type.value} | Status={case.status.value} | "
        f"Recommendation={analysis.recommended_action.value}"
    )

    return PipelineResult(dispute=dispute, resolution_case=case)
