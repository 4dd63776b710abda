import re
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =================================================
# Enumerations
# =================================================

class VendorStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class PaymentStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"
    PARTIAL = "partial"


class Tone(str, Enum):
    PROFESSIONAL = "professional"
    FRUSTRATED = "frustrated"
    HOSTILE = "hostile"
    NEUTRAL = "neutral"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendedAction(str, Enum):
    APPROVE_PAYMENT = "approve_payment"
    REJECT_CLAIM = "reject_claim"
    PARTIAL_PAYMENT = "partial_payment"
    FURTHER_INVESTIGATION = "further_investigation"


class DisputeType(str, Enum):
    UNDERPAYMENT = "underpayment"
    LATE_PAYMENT = "late_payment"
    INVOICE_DISCREPANCY = "invoice_discrepancy"
    CONTRACT_VIOLATION = "contract_violation"
    OTHER = "other"


class DisputeStatus(str, Enum):
    OPEN = "open"
    IN_ANALYSIS = "in_analysis"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"
    RESOLVED = "resolved"


class CaseStatus(str, Enum):
    DRAFTED = "drafted"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    SENT = "sent"
    ARCHIVED = "archived"


# =================================================
# Reference data
# =================================================

class Vendor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    contact_person: str
    contract_id: str
    payment_terms: str
    currency: str = "USD"
    status: VendorStatus = VendorStatus.ACTIVE
    created_at: date


class ContractTerms(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_description: str
    scope: str
    liabilities: str
    dispute_resolution: str
    special_clauses: List[str] = Field(default_factory=list)


class PaymentTerms(BaseModel):
    model_config = ConfigDict(frozen=True)

    terms_name: str
    standard_days: int
    early_payment_discount: Optional[float] = None
    discount_days: Optional[int] = None
    late_fee_percentage: Optional[float] = None


class Contract(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    vendor_id: str
    contract_number: str
    effective_date: date
    expiration_date: date
    terms: ContractTerms
    payment_terms: PaymentTerms


class PaymentRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    invoice_number: str
    vendor_id: str
    amount: float
    invoice_date: date
    due_date: date
    paid_date: Optional[date] = None
    amount_paid: Optional[float] = None
    status: PaymentStatus


# =================================================
# Email
# =================================================

class Email(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    sender: str
    recipient: str
    subject: str
    body: str
    received_at: datetime = Field(default_factory=_utcnow)
    vendor_id: str


# =================================================
# Extraction
# =================================================

_AMOUNT_NOISE = re.compile(r"[$,\s]")
_CURRENCY_CODE = re.compile(r"(?<![A-Za-z])[A-Za-z]{3}(?![A-Za-z])")


class ExtractedDisputeFacts(BaseModel):
    """
    Facts as stated in the email text. Keys follow the JSON shape requested
    from the model; they are never reconciled against the Vendor record.
    """

    model_config = ConfigDict(populate_by_name=True)

    vendor_name: str = Field(alias="vendorName")
    vendor_email: str = Field(default="", alias="vendorEmail")
    invoice_numbers: List[str] = Field(alias="invoiceNumbers")
    amounts: List[float] = Field(alias="amounts")
    main_complaint: str = Field(alias="mainComplaint")
    evidence_provided: List[str] = Field(default_factory=list, alias="evidenceProvided")
    tone: Tone = Field(default=Tone.NEUTRAL, alias="tone")

    @field_validator("vendor_email", mode="before")
    @classmethod
    def _none_email(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("invoice_numbers", "evidence_provided", mode="before")
    @classmethod
    def _none_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("amounts", mode="before")
    @classmethod
    def _coerce_amounts(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        # "$2,000" or "USD 2,000" -> "2000"; pydantic then parses it as a float
        return [
            _AMOUNT_NOISE.sub("", _CURRENCY_CODE.sub("", item)) if isinstance(item, str) else item
            for item in value
        ]

    @field_validator("tone", mode="before")
    @classmethod
    def _normalize_tone(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() in {t.value for t in Tone}:
            return value.strip().lower()
        return Tone.NEUTRAL


# =================================================
# Knowledge base
# =================================================

class SearchSource(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    content: str = ""
    score: float = 0.0


class SearchResult(BaseModel):
    answer: str = ""
    sources: List[SearchSource] = Field(default_factory=list)
    total_results: Optional[int] = None
    processing_time_ms: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        """
        An explicit zero count, or no answer and no sources. A response that
        omits the count still carries results.
        """
        if self.total_results == 0:
            return True
        return not self.answer.strip() and not self.sources


class KnowledgeBundle(BaseModel):
    contract_number: str
    vendor_name: str
    payment_terms: str
    service_description: str
    dispute_resolution: str
    special_clauses: List[str]
    effective_date: str
    expiration_date: str
    raw_context: str


# =================================================
# Analysis and case
# =================================================

class DisputeAnalysis(BaseModel):
    case_id: str
    vendor_id: str
    initial_analysis: str
    confidence: Confidence = Confidence.MEDIUM
    recommended_action: RecommendedAction = RecommendedAction.FURTHER_INVESTIGATION
    reasoning: str
    draft_response: str
    required_approvals: List[str]
    knowledge_base_used: bool = False


class Dispute(BaseModel):
    id: str
    case_id: str
    vendor_id: str
    vendor_name: str
    dispute_type: DisputeType
    amount: float = 0
    currency: str = "USD"
    invoice_number: str
    status: DisputeStatus = DisputeStatus.IN_ANALYSIS
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class ResolutionCase(BaseModel):
    id: str
    dispute_id: str
    vendor_id: str
    analysis: DisputeAnalysis
    status: CaseStatus = CaseStatus.DRAFTED
    created_by: str
    notes: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None


class PipelineResult(BaseModel):
    dispute: Dispute
    resolution_case: ResolutionCase

    @property
    def email_analysis(self) -> str:
        return self.resolution_case.analysis.initial_analysis


class SubmissionResult(BaseModel):
    case_id: str
    vendor_name: str
    recommendation: RecommendedAction
    confidence: Confidence
    reasoning: str
    required_approvals: List[str]
    draft_response: str
    full_analysis: str
    case_data: ResolutionCase


# =================================================
# Mailbox
# =================================================

class NormalizedMessage(BaseModel):
    id: str
    thread_id: Optional[str] = None
    sender: str
    recipient: str = ""
    subject: str = "(no subject)"
    body: str = ""
    received_at: datetime = Field(default_factory=_utcnow)
