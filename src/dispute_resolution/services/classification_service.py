"""
Deterministic classification of the analysis narrative.

Every function here is pure: no generation calls, no I/O, and no failure
path. When a pattern is not found the documented default is returned.
"""

import re
from typing import Dict, List, Tuple

from dispute_resolution.schemas import Confidence, DisputeType, RecommendedAction


REASONING_FALLBACK = "See full analysis above"

# Section headings may carry a list number ("4.") and markdown emphasis.
_HEADING_PREFIX = r"^[ \t>#*]*(?:\d+\.[ \t]*)?[*_]*"

_REASONING_PATTERN = re.compile(
    _HEADING_PREFIX + r"ANALYSIS[*_]*:?[*_]*[ \t]*(.*?)"
    r"(?=^[ \t>#*]*\d+\.|" + _HEADING_PREFIX + r"RECOMMENDATION|\Z)",
    re.IGNORECASE | re.MULTILINE | re.DOTALL,
)

_DRAFT_PATTERN = re.compile(
    _HEADING_PREFIX + r"DRAFT RESPONSE[*_]*:?[*_]*[ \t]*(.*)\Z",
    re.IGNORECASE | re.MULTILINE | re.DOTALL,
)

FINANCE_MANAGER = "Finance Manager"

REQUIRED_APPROVALS: Dict[RecommendedAction, List[str]] = {
    RecommendedAction.APPROVE_PAYMENT: [FINANCE_MANAGER, "Department Head"],
    RecommendedAction.REJECT_CLAIM: [FINANCE_MANAGER],
    RecommendedAction.PARTIAL_PAYMENT: [FINANCE_MANAGER, "Vendor Manager"],
    RecommendedAction.FURTHER_INVESTIGATION: [FINANCE_MANAGER, "Legal"],
}

# First match wins, in this order.
DISPUTE_TYPE_KEYWORDS: List[Tuple[DisputeType, Tuple[str, ...]]] = [
    (DisputeType.UNDERPAYMENT, ("underpay", "short", "less than")),
    (DisputeType.LATE_PAYMENT, ("late", "delay", "overdue")),
    (DisputeType.INVOICE_DISCREPANCY, ("invoice", "amount", "discrepanc")),
    (DisputeType.CONTRACT_VIOLATION, ("contract", "agreement", "terms")),
]


def extract_confidence(narrative: str) -> Confidence:
    lowered = narrative.lower()
    if "high confidence" in lowered:
        return Confidence.HIGH
    if "low confidence" in lowered:
        return Confidence.LOW
    return Confidence.MEDIUM


def extract_recommendation(narrative: str) -> RecommendedAction:
    """
    Keyword precedence: approve+payment, then reject/deny, then
    partial/compromise, else further investigation.
    """
    lowered = narrative.lower()
    if "approve" in lowered and "payment" in lowered:
        return RecommendedAction.APPROVE_PAYMENT
    if "reject" in lowered or "deny" in lowered:
        return RecommendedAction.REJECT_CLAIM
    if "partial" in lowered or "compromise" in lowered:
        return RecommendedAction.PARTIAL_PAYMENT
    return RecommendedAction.FURTHER_INVESTIGATION


def extract_reasoning(narrative: str) -> str:
    match = _REASONING_PATTERN.search(narrative)
    if not match:
        return REASONING_FALLBACK
    return match.group(1).strip()


def extract_draft_response(narrative: str) -> str:
    match = _DRAFT_PATTERN.search(narrative)
    if not match:
        return ""
    return match.group(1).strip()


def required_approvals(action) -> List[str]:
    try:
        action = RecommendedAction(action)
    except ValueError:
        return [FINANCE_MANAGER]
    return list(REQUIRED_APPROVALS[action])


def determine_dispute_type(complaint: str) -> DisputeType:
    lowered = complaint.lower()
    for dispute_type, keywords in DISPUTE_TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return dispute_type
    return DisputeType.OTHER
