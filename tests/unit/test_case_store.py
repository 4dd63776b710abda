import pytest

from conftest import UNDERPAYMENT_FACTS
from dispute_resolution.reference.sample_emails import get_sample_email
from dispute_resolution.schemas import DisputeAnalysis, ExtractedDisputeFacts
from dispute_resolution.services.case_service import create_resolution_case


def _result(case_id: str):
    analysis = DisputeAnalysis(
        case_id=case_id,
        vendor_id="VENDOR-001",
        initial_analysis="narrative",
        reasoning="reasoning",
        draft_response="",
        required_approvals=["Finance Manager", "Legal"],
    )
    return create_resolution_case(
        email=get_sample_email("EMAIL-001"),
        facts=ExtractedDisputeFacts.model_validate(UNDERPAYMENT_FACTS),
        analysis=analysis,
    )


def test_case_file_named_by_case_id(case_store):
    path = case_store.save(_result("CASE-1-AAAAAA"))

    assert path.name == "CASE-1-AAAAAA.json"
    assert path.parent == case_store.directory


def test_case_file_contents(case_store):
    result = _result("CASE-2-BBBBBB")
    case_store.save(result)

    document = case_store.load("CASE-2-BBBBBB")

    assert document["id"] == result.resolution_case.id
    assert document["status"] == "drafted"
    assert document["analysis"]["case_id"] == "CASE-2-BBBBBB"
    assert document["analysis"]["recommended_action"] == "further_investigation"
    assert document["dispute"]["invoice_number"] == "INV-2024-0004"
    assert document["dispute"]["amount"] == 2000


def test_existing_case_is_never_overwritten(case_store):
    case_store.save(_result("CASE-3-CCCCCC"))
    original = case_store.path_for("CASE-3-CCCCCC").read_text()

    with pytest.raises(FileExistsError):
        case_store.save(_result("CASE-3-CCCCCC"))

    assert case_store.path_for("CASE-3-CCCCCC").read_text() == original


def test_distinct_cases_get_distinct_files(case_store):
    case_store.save(_result("CASE-4-DDDDDD"))
    case_store.save(_result("CASE-4-EEEEEE"))

    assert sorted(p.name for p in case_store.directory.iterdir()) == [
        "CASE-4-DDDDDD.json",
        "CASE-4-EEEEEE.json",
    ]
