from datetime import date
from typing import List, Optional

from dispute_resolution.schemas import (
    Contract,
    ContractTerms,
    PaymentTerms,
    Vendor,
    VendorStatus,
)


VENDORS: List[Vendor] = [
    Vendor(
        id="VENDOR-001",
        name="TechSupply Co.",
        email="billing@techsupply.com",
        contact_person="John Smith",
        contract_id="CONTRACT-2024-001",
        payment_terms="Net 30",
        status=VendorStatus.ACTIVE,
        created_at=date(2024, 1, 15),
    ),
    Vendor(
        id="VENDOR-002",
        name="Office Solutions Inc.",
        email="accounts@officesolutions.com",
        contact_person="Sarah Johnson",
        contract_id="CONTRACT-2024-002",
        payment_terms="Net 45",
        status=VendorStatus.ACTIVE,
        created_at=date(2024, 3, 10),
    ),
    Vendor(
        id="VENDOR-003",
        name="Logistics Express",
        email="finance@logisticsexpress.com",
        contact_person="Mike Chen",
        contract_id="CONTRACT-2024-003",
        payment_terms="2/10 Net 30",
        status=VendorStatus.ACTIVE,
        created_at=date(2024, 2, 20),
    ),
]


CONTRACTS: List[Contract] = [
    Contract(
        id="CONTRACT-2024-001",
        vendor_id="VENDOR-001",
        contract_number="TSC-2024-001",
        effective_date=date(2024, 1, 1),
        expiration_date=date(2025, 12, 31),
        terms=ContractTerms(
            service_description="Supply of IT equipment and accessories",
            scope="Computers, monitors, keyboards, mice, networking equipment",
            liabilities="Vendor responsible for defective goods within 30 days",
            dispute_resolution=(
                "Initial contact with Account Manager, escalate to Legal "
                "if unresolved after 5 business days"
            ),
            special_clauses=[
                "Early Payment Discount: 2% off if paid within 10 days",
                "Volume discount applies: 5% off for orders over $10,000",
                "Returns must be approved within 14 days of receipt",
            ],
        ),
        payment_terms=PaymentTerms(
            terms_name="Net 30",
            standard_days=30,
            early_payment_discount=2,
            discount_days=10,
            late_fee_percentage=1.5,
        ),
    ),
    Contract(
        id="CONTRACT-2024-002",
        vendor_id="VENDOR-002",
        contract_number="OSI-2024-001",
        effective_date=date(2024, 1, 1),
        expiration_date=date(2025, 12, 31),
        terms=ContractTerms(
            service_description="Office furniture and supplies",
            scope="Desks, chairs, filing cabinets, printer paper, office supplies",
            liabilities="Vendor responsible for damaged goods upon delivery",
            dispute_resolution=(
                "Email disputes to disputes@officesolutions.com, "
                "response within 3 business days"
            ),
            special_clauses=[
                "Free shipping on orders over $5,000",
                "Custom furniture orders are non-refundable",
                "Bulk supply agreements have quarterly pricing adjustments",
            ],
        ),
        payment_terms=PaymentTerms(
            terms_name="Net 45",
            standard_days=45,
            early_payment_discount=1,
            discount_days=15,
        ),
    ),
    Contract(
        id="CONTRACT-2024-003",
        vendor_id="VENDOR-003",
        contract_number="LE-2024-001",
        effective_date=date(2024, 1, 1),
        expiration_date=date(2025, 12, 31),
        terms=ContractTerms(
            service_description="Shipping and logistics services",
            scope="Domestic and international shipping, warehousing, inventory management",
            liabilities="Liability capped at invoice value; insurance available at additional cost",
            dispute_resolution="Escalate to Finance Manager for amounts over $1,000",
            special_clauses=[
                "Fuel surcharge may apply based on market rates",
                "Weight discrepancies: vendor reconciles monthly with actual shipments",
                "Expedited shipping available at 25% premium",
            ],
        ),
        payment_terms=PaymentTerms(
            terms_name="2/10 Net 30",
            standard_days=30,
            early_payment_discount=2,
            discount_days=10,
            late_fee_percentage=2,
        ),
    ),
]


def get_vendor_by_id(vendor_id: str) -> Optional[Vendor]:
    return next((v for v in VENDORS if v.id == vendor_id), None)


def get_vendor_by_email(email: str) -> Optional[Vendor]:
    """
    Case-insensitive exact match on the vendor contact address.
    """
    normalized = email.strip().lower()
    return next((v for v in VENDORS if v.email.lower() == normalized), None)


def get_contract_by_vendor_id(vendor_id: str) -> Optional[Contract]:
    return next((c for c in CONTRACTS if c.vendor_id == vendor_id), None)
