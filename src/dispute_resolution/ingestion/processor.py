from enum import Enum
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from dispute_resolution.ingestion.gmail_client import Mailbox
from dispute_resolution.ingestion.message_parser import extract_email_address
from dispute_resolution.llm.client import TextGenerator
from dispute_resolution.models import ProcessedGmailMessage
from dispute_resolution.reference.vendors import get_contract_by_vendor_id, get_vendor_by_email
from dispute_resolution.schemas import Email
from dispute_resolution.services.case_store import CaseStore
from dispute_resolution.services.dispute_resolution_service import process_vendor_email
from dispute_resolution.services.knowledge_service import KnowledgeSearch
from dispute_resolution.utils.logging import logger


class ProcessingOutcome(str, Enum):
    PROCESSED = "processed"
    ALREADY_PROCESSED = "already_processed"
    MISSING_PAYLOAD = "missing_payload"
    UNKNOWN_VENDOR = "unknown_vendor"
    MISSING_CONTRACT = "missing_contract"


async def process_message(
    db: AsyncSession,
    mailbox: Mailbox,
    message_id: str,
    *,
    case_store: CaseStore,
    generator: Optional[TextGenerator] = None,
    search: Optional[KnowledgeSearch] = None,
) -> ProcessingOutcome:
    """
    Ingest one mailbox message.

    The message is marked read only after its case file and ledger row are
    committed. Every skip leaves it unread for the next cycle. Pipeline
    errors propagate to the poller.
    """

    # -------------------------------------------------
    # 1. Idempotency
    # -------------------------------------------------
    if await db.get(ProcessedGmailMessage, message_id):
        logger.info(f"Message {message_id} already has a case, marking read")
        mailbox.mark_read(message_id)
        return ProcessingOutcome.ALREADY_PROCESSED

    # -------------------------------------------------
    # 2. Fetch + normalize
    # -------------------------------------------------
    normalized = mailbox.fetch(message_id)
    if normalized is None:
        logger.warning(f"Skipping message with no payload | Message={message_id}")
        return ProcessingOutcome.MISSING_PAYLOAD

    # -------------------------------------------------
    # 3. Vendor + contract resolution
    # -------------------------------------------------
    from_email = extract_email_address(normalized.sender)

    vendor = get_vendor_by_email(from_email)
    if not vendor:
        logger.warning(
            f"Vendor not found for incoming email; leaving unread | "
            f"Message={message_id} | From={from_email}"
        )
        return ProcessingOutcome.UNKNOWN_VENDOR

    contract = get_contract_by_vendor_id(vendor.id)
    if not contract:
        logger.warning(
            f"Contract not found for vendor; leaving unread | "
            f"Message={message_id} | Vendor={vendor.id}"
        )
        return ProcessingOutcome.MISSING_CONTRACT

    # -------------------------------------------------
    # 4. Pipeline
    # -------------------------------------------------
    email = Email(
        id=message_id,
        sender=from_email,
        recipient=normalized.recipient,
        subject=normalized.subject,
        body=normalized.body,
        received_at=normalized.received_at,
        vendor_id=vendor.id,
    )

    result = process_vendor_email(
        email=email,
        vendor=vendor,
        contract=contract,
        generator=generator,
        search=search,
    )
    case_id = result.resolution_case.analysis.case_id

    # -------------------------------------------------
    # 5. Persist case, then ledger
    # -------------------------------------------------
    case_store.save(result)

    db.add(
        ProcessedGmailMessage(
            gmail_message_id=message_id,
            case_id=case_id,
        )
    )
    await db.commit()

    # -------------------------------------------------
    # 6. Mark read (AFTER commit)
    # -------------------------------------------------
    mailbox.mark_read(message_id)

    logger.info(
        f"Processed DISPUTE email {message_id} | Case={case_id} | "
        f"Recommendation={result.resolution_case.analysis.recommended_action.value}"
    )
    return ProcessingOutcome.PROCESSED
