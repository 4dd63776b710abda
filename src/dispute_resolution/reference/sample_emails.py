from datetime import datetime, timezone
from typing import List, Optional

from dispute_resolution.schemas import Email


SAMPLE_EMAILS: List[Email] = [
    Email(
        id="EMAIL-001",
        sender="billing@techsupply.com",
        recipient="finance@company.com",
        subject="Invoice INV-2024-0004 - Underpayment Issue",
        body=(
            "Hi,\n\n"
            "I'm writing about a discrepancy with invoice INV-2024-0004 for $2,000.\n\n"
            "We submitted this invoice on December 15, 2024, with a due date of "
            "January 14, 2025. Our contract gives a 2% early payment discount if "
            "paid within 10 days of the invoice date, which has now passed without "
            "any payment. We think there may be some confusion about which "
            "discounts apply to this order.\n\n"
            "Could you confirm the payment status and when we can expect payment? "
            "Our normal payment terms are Net 30.\n\n"
            "Best regards,\nJohn Smith\nTechSupply Co."
        ),
        received_at=datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc),
        vendor_id="VENDOR-001",
    ),
    Email(
        id="EMAIL-002",
        sender="accounts@officesolutions.com",
        recipient="finance@company.com",
        subject="URGENT: Invoice OSI-INV-521 - Payment Discrepancy",
        body=(
            "Hello,\n\n"
            "This concerns Invoice OSI-INV-521 dated November 1, 2024, for $4,500 "
            "in office furniture.\n\n"
            "Your payment of $4,500 arrived on December 18, 2024. The shipment "
            "also included $500 of custom chair modifications agreed in the order, "
            "which should have been billed separately. Custom work is "
            "non-refundable under our contract, so we believe you are short by "
            "$500 and ask for immediate payment of that amount.\n\n"
            "Please resolve this as soon as possible.\n\n"
            "Thank you,\nSarah Johnson\nOffice Solutions Inc."
        ),
        received_at=datetime(2025, 1, 14, 14, 15, tzinfo=timezone.utc),
        vendor_id="VENDOR-002",
    ),
    Email(
        id="EMAIL-003",
        sender="finance@logisticsexpress.com",
        recipient="finance@company.com",
        subject="Question about Invoice LE-2024-456 - Fuel Surcharge",
        body=(
            "Hi Finance Team,\n\n"
            "Quick question about invoice LE-2024-456 for $6,000 dated "
            "December 20, 2024.\n\n"
            "Our contract lets us adjust rates for fuel costs. Looking at that "
            "month's fuel prices, an additional $300 surcharge should have applied "
            "to this invoice. You paid the full $6,000, so we'd like to confirm "
            "whether the surcharge should be invoiced separately.\n\n"
            "Thanks,\nMike Chen\nLogistics Express"
        ),
        received_at=datetime(2025, 1, 13, 9, 45, tzinfo=timezone.utc),
        vendor_id="VENDOR-003",
    ),
]


def get_sample_email(email_id: str) -> Optional[Email]:
    return next((e for e in SAMPLE_EMAILS if e.id == email_id), None)
