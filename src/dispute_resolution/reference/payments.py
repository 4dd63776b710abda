from datetime import date
from typing import List

from dispute_resolution.schemas import PaymentRecord, PaymentStatus


PAYMENT_HISTORY: List[PaymentRecord] = [
    # TechSupply Co.
    PaymentRecord(
        invoice_number="INV-2024-0001",
        vendor_id="VENDOR-001",
        amount=2500,
        invoice_date=date(2024, 12, 1),
        due_date=date(2024, 12, 31),
        paid_date=date(2024, 12, 25),
        amount_paid=2500,
        status=PaymentStatus.PAID,
    ),
    PaymentRecord(
        invoice_number="INV-2024-0002",
        vendor_id="VENDOR-001",
        amount=1500,
        invoice_date=date(2024, 12, 10),
        due_date=date(2024, 12, 31),
        paid_date=date(2025, 1, 5),
        amount_paid=1500,
        status=PaymentStatus.PAID,
    ),
    PaymentRecord(
        invoice_number="INV-2024-0003",
        vendor_id="VENDOR-001",
        amount=3000,
        invoice_date=date(2025, 1, 1),
        due_date=date(2025, 1, 31),
        amount_paid=3000,
        status=PaymentStatus.PAID,
    ),
    PaymentRecord(
        invoice_number="INV-2024-0004",
        vendor_id="VENDOR-001",
        amount=2000,
        invoice_date=date(2024, 12, 15),
        due_date=date(2025, 1, 14),
        status=PaymentStatus.PENDING,
    ),
    # Office Solutions Inc.
    PaymentRecord(
        invoice_number="OSI-INV-521",
        vendor_id="VENDOR-002",
        amount=4500,
        invoice_date=date(2024, 11, 1),
        due_date=date(2024, 12, 15),
        paid_date=date(2024, 12, 18),
        amount_paid=4500,
        status=PaymentStatus.PAID,
    ),
    PaymentRecord(
        invoice_number="OSI-INV-522",
        vendor_id="VENDOR-002",
        amount=2800,
        invoice_date=date(2024, 12, 1),
        due_date=date(2025, 1, 15),
        status=PaymentStatus.PENDING,
    ),
    # Logistics Express
    PaymentRecord(
        invoice_number="LE-2024-456",
        vendor_id="VENDOR-003",
        amount=6000,
        invoice_date=date(2024, 12, 20),
        due_date=date(2025, 1, 19),
        paid_date=date(2025, 1, 12),
        amount_paid=6000,
        status=PaymentStatus.PAID,
    ),
    PaymentRecord(
        invoice_number="LE-2024-457",
        vendor_id="VENDOR-003",
        amount=4500,
        invoice_date=date(2025, 1, 5),
        due_date=date(2025, 2, 4),
        status=PaymentStatus.PENDING,
    ),
]


def get_payment_history(vendor_id: str) -> List[PaymentRecord]:
    return [p for p in PAYMENT_HISTORY if p.vendor_id == vendor_id]
