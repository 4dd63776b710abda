import json

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from dispute_resolution.exceptions import GenerationFailure
from dispute_resolution.llm.client import CannedGenerator, ChatModelGenerator
from dispute_resolution.llm.prompts import ANALYSIS_SYSTEM_PROMPT, EXTRACTION_SYSTEM_PROMPT
from dispute_resolution.schemas import RecommendedAction
from dispute_resolution.services.classification_service import extract_recommendation
from dispute_resolution.utils.llm import normalize_llm_content, strip_code_fences


class StubChatModel:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.messages = None

    def invoke(self, messages):
        self.messages = messages
        if self.error:
            raise self.error
        return AIMessage(content=self.content)


def test_generator_sends_system_and_user_messages():
    model = StubChatModel(content="narrative")

    text = ChatModelGenerator(model).generate("the prompt", "the system")

    assert text == "narrative"
    assert isinstance(model.messages[0], SystemMessage)
    assert model.messages[0].content == "the system"
    assert isinstance(model.messages[1], HumanMessage)
    assert model.messages[1].content == "the prompt"


def test_generator_joins_text_blocks():
    model = StubChatModel(content=[{"type": "text", "text": "part one"}, {"type": "text", "text": "part two"}])
    assert ChatModelGenerator(model).generate("p", "s") == "part one\npart two"


def test_generator_rejects_non_text_content():
    model = StubChatModel(content=[{"type": "image", "source": {}}])

    with pytest.raises(GenerationFailure):
        ChatModelGenerator(model).generate("p", "s")


def test_generator_wraps_transport_errors():
    model = StubChatModel(error=ConnectionError("ollama not running"))

    with pytest.raises(GenerationFailure) as exc_info:
        ChatModelGenerator(model).generate("p", "s")

    assert exc_info.value.http_status == 502
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_canned_generator():
    generator = CannedGenerator()

    facts = json.loads(generator.generate("email", EXTRACTION_SYSTEM_PROMPT))
    narrative = generator.generate("analysis", ANALYSIS_SYSTEM_PROMPT)

    assert facts["invoiceNumbers"] == ["INV-2024-0004"]
    assert extract_recommendation(narrative) == RecommendedAction.APPROVE_PAYMENT


def test_normalize_llm_content():
    assert normalize_llm_content("plain") == "plain"
    assert normalize_llm_content(["a", {"type": "text", "text": "b"}]) == "a\nb"
    assert normalize_llm_content([]) is None
    assert normalize_llm_content(None) is None


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'
