"""
Run every sample vendor email through the dispute pipeline and store the
resulting cases.

    LLM_PROVIDER=mock python -m dispute_resolution.demo
"""

from typing import Optional

from dispute_resolution.exceptions import DisputeResolutionError
from dispute_resolution.llm.client import TextGenerator
from dispute_resolution.reference.sample_emails import SAMPLE_EMAILS
from dispute_resolution.reference.vendors import get_contract_by_vendor_id, get_vendor_by_id
from dispute_resolution.schemas import PipelineResult
from dispute_resolution.services.case_store import CaseStore
from dispute_resolution.services.dispute_resolution_service import process_vendor_email
from dispute_resolution.services.knowledge_service import KnowledgeSearch
from dispute_resolution.utils.logging import configure_logging, logger


def run_demo(
    *,
    case_store: Optional[CaseStore] = None,
    generator: Optional[TextGenerator] = None,
    search: Optional[KnowledgeSearch] = None,
) -> list[PipelineResult]:
    case_store = case_store or CaseStore()
    results: list[PipelineResult] = []

    for email in SAMPLE_EMAILS:
        logger.info(f"Processing sample email {email.id}")

        vendor = get_vendor_by_id(email.vendor_id)
        if not vendor:
            logger.error(f"Vendor not found: {email.vendor_id}")
            continue

        contract = get_contract_by_vendor_id(vendor.id)
        if not contract:
            logger.error(f"Contract not found for vendor: {vendor.id}")
            continue

        try:
            result = process_vendor_email(
                email=email,
                vendor=vendor,
                contract=contract,
                generator=generator,
                search=search,
            )
        except DisputeResolutionError as exc:
            logger.error(f"Failed to process email {email.id}: {exc.detail}")
            continue

        try:
            case_store.save(result)
        except OSError:
            logger.exception(f"Failed to save case for email {email.id}")
            continue

        analysis = result.resolution_case.analysis
        logger.info(
            f"RESOLUTION CASE CREATED | Case={analysis.case_id} | Vendor={vendor.name} | "
            f"Status={result.resolution_case.status.value} | "
            f"Recommendation={analysis.recommended_action.value} | "
            f"Confidence={analysis.confidence.value} | "
            f"Approvals={', '.join(analysis.required_approvals)}"
        )
        logger.info(f"DRAFT RESPONSE TO VENDOR:\n{analysis.draft_response}")

        results.append(result)

    logger.info(f"Demo completed: {len(results)}/{len(SAMPLE_EMAILS)} cases in {case_store.directory}")
    return results


def main():
    configure_logging()
    run_demo()


if __name__ == "__main__":
    main()
