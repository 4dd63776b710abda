import json

from conftest import FakeGenerator, FakeSearch
from dispute_resolution.demo import run_demo
from dispute_resolution.reference.sample_emails import SAMPLE_EMAILS
from dispute_resolution.schemas import RecommendedAction, SearchResult

# Sample emails, each with the facts a model would extract from it.
EXTRACTIONS = {
    "EMAIL-001": {
        "vendorName": "TechSupply Co.",
        "vendorEmail": "billing@techsupply.com",
        "invoiceNumbers": ["INV-2024-0004"],
        "amounts": ["$2,000"],
        "mainComplaint": "Invoice INV-2024-0004 is unpaid; the vendor suspects an underpayment.",
        "evidenceProvided": ["invoice number", "due date"],
        "tone": "professional",
    },
    "EMAIL-002": {
        "vendorName": "Office Solutions Inc.",
        "vendorEmail": "accounts@officesolutions.com",
        "invoiceNumbers": ["OSI-INV-521"],
        "amounts": [500],
        "mainComplaint": "Payment arrived $500 short for custom chair modifications.",
        "evidenceProvided": ["order agreement"],
        "tone": "frustrated",
    },
    "EMAIL-003": {
        "vendorName": "Logistics Express",
        "vendorEmail": "finance@logisticsexpress.com",
        "invoiceNumbers": ["LE-2024-456"],
        "amounts": [300],
        "mainComplaint": "Asks whether a fuel surcharge under the agreement should be billed.",
        "evidenceProvided": [],
        "tone": "neutral",
    },
}

NARRATIVES = {
    "EMAIL-001": "4. ANALYSIS: Unpaid.\n5. RECOMMENDATION: approve_payment\n7. DRAFT RESPONSE: Paying now.",
    "EMAIL-002": "4. ANALYSIS: Custom work was paid.\n5. RECOMMENDATION: reject_claim\n7. DRAFT RESPONSE: Declined.",
    "EMAIL-003": "4. ANALYSIS: Clause is vague.\n5. RECOMMENDATION: partial_payment\n7. DRAFT RESPONSE: Half.",
}


class SampleEmailGenerator(FakeGenerator):
    """Answers per sample email, keyed on the email subject in the prompt."""

    def generate(self, prompt: str, system_instruction: str) -> str:
        self.calls.append((prompt, system_instruction))
        email = next(e for e in SAMPLE_EMAILS if e.subject in prompt)
        if "JSON" in system_instruction:
            return "```json\n" + json.dumps(EXTRACTIONS[email.id]) + "\n```"
        return NARRATIVES[email.id]


def test_sample_emails_become_cases(case_store):
    generator = SampleEmailGenerator()
    search = FakeSearch(SearchResult(total_results=0))

    results = run_demo(case_store=case_store, generator=generator, search=search)

    assert len(results) == 3
    assert len(generator.calls) == 6

    by_vendor = {r.dispute.vendor_id: r for r in results}

    techsupply = by_vendor["VENDOR-001"]
    assert techsupply.dispute.dispute_type.value == "underpayment"
    assert techsupply.dispute.amount == 2000
    assert techsupply.resolution_case.analysis.recommended_action == RecommendedAction.APPROVE_PAYMENT

    office = by_vendor["VENDOR-002"]
    assert office.dispute.dispute_type.value == "underpayment"
    assert office.resolution_case.analysis.recommended_action == RecommendedAction.REJECT_CLAIM
    assert office.resolution_case.analysis.required_approvals == ["Finance Manager"]

    logistics = by_vendor["VENDOR-003"]
    assert logistics.dispute.dispute_type.value == "contract_violation"
    assert logistics.resolution_case.analysis.draft_response == "Half."

    stored = sorted(p.stem for p in case_store.directory.iterdir())
    assert stored == sorted(r.resolution_case.analysis.case_id for r in results)


def test_failing_email_does_not_stop_the_demo(case_store):
    class BrokenForOffice(SampleEmailGenerator):
        def generate(self, prompt: str, system_instruction: str) -> str:
            if "OSI-INV-521" in prompt and "JSON" in system_instruction:
                return "no json here"
            return super().generate(prompt, system_instruction)

    results = run_demo(
        case_store=case_store,
        generator=BrokenForOffice(),
        search=FakeSearch(SearchResult(total_results=0)),
    )

    assert sorted(r.dispute.vendor_id for r in results) == ["VENDOR-001", "VENDOR-003"]
    assert len(list(case_store.directory.iterdir())) == 2


def test_failed_case_save_does_not_stop_the_demo(case_store, monkeypatch):
    real_save = case_store.save
    attempts = []

    def save_fails_once(result):
        attempts.append(result.dispute.vendor_id)
        if len(attempts) == 1:
            raise OSError("disk full")
        return real_save(result)

    monkeypatch.setattr(case_store, "save", save_fails_once)

    results = run_demo(
        case_store=case_store,
        generator=SampleEmailGenerator(),
        search=FakeSearch(SearchResult(total_results=0)),
    )

    assert attempts == ["VENDOR-001", "VENDOR-002", "VENDOR-003"]
    assert sorted(r.dispute.vendor_id for r in results) == ["VENDOR-002", "VENDOR-003"]
    assert len(list(case_store.directory.iterdir())) == 2
