"""Tests for the support and learning persona assistants."""

from __future__ import annotations

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from linguachat.assistants import LearningAssistant, SupportAssistant, create_assistants
from linguachat.models import ConversationTurn
from linguachat.prompts import LEARNING_SYSTEM_PROMPT, SUPPORT_SYSTEM_PROMPT


class TestSupportAssistant:
    def test_single_call_with_support_prompt(self, make_llm):
        llm = make_llm(plain="Please check your microphone permissions.")
        result = SupportAssistant(llm).process_query("my microphone does not work")

        assert result.success is True
        assert result.mode == "Support Mode"
        assert result.response == "Please check your microphone permissions."
        assert result.sources == []
        sent = llm.invoke.call_args[0][0]
        assert isinstance(sent[0], SystemMessage)
        assert sent[0].content == SUPPORT_SYSTEM_PROMPT
        assert sent[-1] == HumanMessage(content="my microphone does not work")
        llm.bind_tools.assert_not_called()

    def test_failure_uses_support_error_mode(self, make_llm):
        llm = make_llm()
        llm.invoke.side_effect = RuntimeError("LLM down")
        result = SupportAssistant(llm).process_query("hello")

        assert result.success is False
        assert result.mode == "Support Error"
        assert result.error == "Failed to process support query"
        assert result.response is None


class TestLearningAssistant:
    def test_history_is_windowed(self, make_llm):
        llm = make_llm(plain="Great sentence!")
        history = [ConversationTurn(sender="user", text=f"line {i}") for i in range(8)]
        LearningAssistant(llm).process_query("I goed to school", history)

        sent = llm.invoke.call_args[0][0]
        assert sent[0].content == LEARNING_SYSTEM_PROMPT
        assert [m.content for m in sent[1:-1]] == [f"line {i}" for i in range(3, 8)]

    def test_bot_turns_become_ai_messages(self, make_llm):
        llm = make_llm(plain="ok")
        history = [ConversationTurn(sender="bot", text="How was your day?")]
        LearningAssistant(llm).process_query("It was good", history)
        assert isinstance(llm.invoke.call_args[0][0][1], AIMessage)

    def test_failure_uses_learning_error_mode(self, make_llm):
        llm = make_llm()
        llm.invoke.side_effect = TimeoutError("slow")
        result = LearningAssistant(llm).process_query("hello")
        assert result.mode == "Learning Error"
        assert result.error == "Failed to process learning query"


def test_create_assistants_shares_the_model(make_llm):
    llm = make_llm()
    assistants = create_assistants(llm)
    assert set(assistants) == {"support", "learning"}
    assert all(a.llm is llm for a in assistants.values())
