import json
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from dispute_resolution.exceptions import GenerationFailure
from dispute_resolution.models import Base
from dispute_resolution.schemas import NormalizedMessage, SearchResult, SearchSource
from dispute_resolution.services.case_store import CaseStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


UNDERPAYMENT_FACTS = {
    "vendorName": "TechSupply Co.",
    "vendorEmail": "billing@techsupply.com",
    "invoiceNumbers": ["INV-2024-0004"],
    "amounts": ["$2,000"],
    "mainComplaint": (
        "The vendor reports an underpayment on invoice INV-2024-0004. "
        "No payment has been received."
    ),
    "evidenceProvided": ["invoice number", "due date"],
    "tone": "professional",
}

APPROVE_NARRATIVE = """1. SUMMARY:
Invoice INV-2024-0004 for $2,000 is unpaid.

2. KEY FACTS:
- Invoice INV-2024-0004: $2,000
- Ledger status: pending

3. CONTRACT REFERENCE:
Net 30.

4. ANALYSIS:
The ledger confirms the invoice is unpaid and past due.
The claim matches the contract.

5. RECOMMENDATION: approve_payment

6. CONFIDENCE: high confidence

7. DRAFT RESPONSE:
Dear John,

We will pay invoice INV-2024-0004 in full.

Finance Team"""


# =================================================
# Fakes
# =================================================

class FakeGenerator:
    """
    Returns the extraction payload for JSON-only system instructions and the
    narrative otherwise. Records every call.
    """

    def __init__(self, extraction=UNDERPAYMENT_FACTS, narrative: str = APPROVE_NARRATIVE):
        self.extraction = extraction
        self.narrative = narrative
        self.calls: list[tuple[str, str]] = []

    def generate(self, prompt: str, system_instruction: str) -> str:
        self.calls.append((prompt, system_instruction))
        if "JSON" in system_instruction:
            if isinstance(self.extraction, str):
                return self.extraction
            return json.dumps(self.extraction)
        return self.narrative

    @property
    def analysis_prompt(self) -> str:
        return next(p for p, s in self.calls if "JSON" not in s)


class FailingGenerator:
    def generate(self, prompt: str, system_instruction: str) -> str:
        raise GenerationFailure("model unavailable")


class FakeSearch:
    def __init__(self, result: Optional[SearchResult] = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.queries: list[tuple[str, int]] = []

    def search(self, query: str, max_results: int) -> Optional[SearchResult]:
        self.queries.append((query, max_results))
        if self.error:
            raise self.error
        return self.result


class FakeMailbox:
    def __init__(self, messages: dict[str, Optional[NormalizedMessage]]):
        self.messages = dict(messages)
        self.unread = list(messages)
        self.marked_read: list[str] = []

    def list_unread(self, max_results: int) -> list[str]:
        return self.unread[:max_results]

    def fetch(self, message_id: str) -> Optional[NormalizedMessage]:
        return self.messages.get(message_id)

    def mark_read(self, message_id: str) -> None:
        self.marked_read.append(message_id)
        if message_id in self.unread:
            self.unread.remove(message_id)


def make_message(message_id: str, sender: str = "John Smith <Billing@TechSupply.com>") -> NormalizedMessage:
    return NormalizedMessage(
        id=message_id,
        sender=sender,
        recipient="finance@company.com",
        subject="Invoice INV-2024-0004 - Underpayment Issue",
        body="We were paid less than the $2,000 on invoice INV-2024-0004.",
    )


KB_ANSWER = """Contract Number: TSC-KB-9000
Vendor Name: TechSupply Co.
Payment Terms: Net 30 with 2% discount within 10 days
Service Description: IT hardware supply
Dispute Resolution: Escalate to Legal after 5 business days
Effective Date: 2024-01-01
Expiration Date: 2025-12-31
Special clauses:
- Knowledge base clause one
- Knowledge base clause two
"""


def kb_result(total_results: int = 2) -> SearchResult:
    return SearchResult(
        answer=KB_ANSWER,
        sources=[
            SearchSource(id="s1", title="Contract", content="Source snippet one", score=0.9),
            SearchSource(id="s2", title="Contract", content="Source snippet two", score=0.7),
        ],
        total_results=total_results,
    )


# =================================================
# Fixtures
# =================================================

@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def empty_search() -> FakeSearch:
    return FakeSearch(SearchResult(answer="", sources=[], total_results=0))


@pytest.fixture
def case_store(tmp_path) -> CaseStore:
    return CaseStore(tmp_path / "cases")


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session
