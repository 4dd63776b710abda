from typing import Iterable, Optional

from dispute_resolution.reference.payments import get_payment_history
from dispute_resolution.schemas import Contract, PaymentRecord, Vendor


# --------------------------------------------------
# Helpers
# --------------------------------------------------

def _percent(value: Optional[float]) -> str:
    return "None" if value is None else f"{value:g}%"


# --------------------------------------------------
# Public API
# --------------------------------------------------

def format_vendor_context(vendor: Vendor) -> str:
    return (
        f"Vendor Name: {vendor.name}\n"
        f"Contact Email: {vendor.email}\n"
        f"Primary Contact: {vendor.contact_person}\n"
        f"Status: {vendor.status.value}\n"
        f"Payment Terms: {vendor.payment_terms}\n"
    )


def format_contract_context(contract: Contract) -> str:
    """
    Render a contract as prompt-ready text.
    Special clauses are numbered and kept in their original order and wording.
    """
    terms = contract.terms
    payment = contract.payment_terms

    discount = _percent(payment.early_payment_discount)
    if payment.early_payment_discount is not None and payment.discount_days:
        discount += f" if paid within {payment.discount_days} days"

    special_clauses = "\n".join(
        f"  {idx}. {clause}" for idx, clause in enumerate(terms.special_clauses, start=1)
    )

    return (
        f"Contract Number: {contract.contract_number}\n"
        f"Effective Date: {contract.effective_date.isoformat()}\n"
        f"Expiration Date: {contract.expiration_date.isoformat()}\n"
        "\n"
        f"Service Description: {terms.service_description}\n"
        f"Scope: {terms.scope}\n"
        "\n"
        f"Payment Terms: {payment.terms_name}\n"
        f"- Standard Payment Days: {payment.standard_days}\n"
        f"- Early Payment Discount: {discount}\n"
        f"- Late Fee: {_percent(payment.late_fee_percentage)}\n"
        "\n"
        f"Vendor Liabilities: {terms.liabilities}\n"
        "\n"
        f"Dispute Resolution Process: {terms.dispute_resolution}\n"
        "\n"
        "Special Clauses:\n"
        f"{special_clauses}\n"
    )


def _format_payment_record(record: PaymentRecord) -> str:
    lines = [
        f"Invoice: {record.invoice_number}",
        f"Amount: ${record.amount:.2f}",
        f"Invoice Date: {record.invoice_date.isoformat()}",
        f"Due Date: {record.due_date.isoformat()}",
        f"Status: {record.status.value}",
    ]
    if record.paid_date:
        lines.append(f"Paid Date: {record.paid_date.isoformat()}")
    if record.amount_paid is not None:
        lines.append(f"Amount Paid: ${record.amount_paid:.2f}")
    return "\n".join(lines)


def format_payment_history(
    vendor_id: str,
    records: Optional[Iterable[PaymentRecord]] = None,
) -> str:
    if records is None:
        records = get_payment_history(vendor_id)

    rendered = "\n---\n".join(_format_payment_record(r) for r in records)
    if not rendered:
        rendered = "No payment records on file."

    return f"Payment History for Vendor {vendor_id}:\n\n{rendered}\n"
