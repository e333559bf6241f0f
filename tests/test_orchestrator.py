"""
Tests for the answer orchestrator: stage ordering, query skip, retrieval
degradation, strict output handling and cancellation.
"""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core import (
    BotResponse,
    ChatTurn,
    InvalidConversationError,
    MalformedOutputError,
    RequestOverrides,
    SupportingContentRecord,
    UnexpectedCompletionCountError,
)
from src.generation.prompts import (
    ANSWER_FORMAT_PROMPT,
    ANSWER_SYSTEM_PROMPT,
    FOLLOW_UP_SYSTEM_PROMPT,
    QUERY_SYSTEM_PROMPT,
)
from src.llm import ChatConversation, Completion
from src.orchestrator import AnswerOrchestrator


class _ScriptedClient:
    """Completion provider that replays scripted candidate lists, one per call."""

    def __init__(self, *responses: list) -> None:
        self._responses = list(responses)
        self.conversations: list[ChatConversation] = []

    def create_conversation(self, system_prompt: str) -> ChatConversation:
        return ChatConversation(system_prompt=system_prompt)

    async def get_completions(self, conversation: ChatConversation) -> list[Completion]:
        self.conversations.append(conversation)
        contents = self._responses.pop(0)
        return [Completion(content=c) for c in contents]


def _answer_json(answer: str = "The deductible is $500 [plan.pdf].", thoughts: str = "used plan.pdf") -> str:
    return json.dumps({"answer": answer, "thoughts": thoughts})


PLAN_RECORD = SupportingContentRecord(title="plan.pdf", content="Deductible is $500")


@pytest.fixture
def retriever():
    ret = MagicMock()
    ret.query_documents = AsyncMock(return_value=[PLAN_RECORD])
    return ret


@pytest.mark.anyio
async def test_reply_with_follow_ups_matches_expected_answer(retriever):
    client = _ScriptedClient(
        ["deductible AND plan"],
        [_answer_json()],
        [json.dumps(["What is the co-pay?", "What is out-of-pocket max?"])],
    )
    orchestrator = AnswerOrchestrator(client, retriever, citation_base_url="https://example/content")
    overrides = RequestOverrides(suggest_follow_up_questions=True)

    resp = await orchestrator.reply([ChatTurn(user="What is the deductible?")], overrides)

    assert isinstance(resp, BotResponse)
    assert resp.answer == (
        "The deductible is $500 [plan.pdf]. <<What is the co-pay?>>  <<What is out-of-pocket max?>> "
    )
    assert resp.thoughts == "used plan.pdf"
    assert resp.data_points == [PLAN_RECORD]
    assert resp.citation_base_url == "https://example/content"
    retriever.query_documents.assert_awaited_once_with("deductible AND plan", None, overrides)

    query_conv, answer_conv, follow_up_conv = client.conversations
    assert query_conv.system_prompt == QUERY_SYSTEM_PROMPT
    assert query_conv.messages == [{"role": "user", "content": "What is the deductible?"}]
    assert answer_conv.system_prompt == ANSWER_SYSTEM_PROMPT
    assert answer_conv.messages[-1]["content"] == ANSWER_FORMAT_PROMPT.format(
        sources="plan.pdf:Deductible is $500"
    )
    assert follow_up_conv.system_prompt == FOLLOW_UP_SYSTEM_PROMPT
    assert "The deductible is $500 [plan.pdf]." in follow_up_conv.messages[0]["content"]


@pytest.mark.anyio
async def test_reply_without_follow_ups_leaves_answer_untouched(retriever):
    client = _ScriptedClient(["deductible"], [_answer_json()])
    orchestrator = AnswerOrchestrator(client, retriever)

    resp = await orchestrator.reply([ChatTurn(user="What is the deductible?")])

    assert resp.answer == "The deductible is $500 [plan.pdf]."
    assert len(client.conversations) == 2
    assert resp.to_dict() == {
        "dataPoints": [{"title": "plan.pdf", "content": "Deductible is $500"}],
        "answer": "The deductible is $500 [plan.pdf].",
        "thoughts": "used plan.pdf",
        "citationBaseUrl": "",
    }


@pytest.mark.anyio
@pytest.mark.parametrize(
    "history",
    [
        [],
        [ChatTurn(user=None)],
        [ChatTurn(user="Hi", bot="Hello!"), ChatTurn(user="")],
        [ChatTurn(user=None, bot="orphan"), ChatTurn(user="What is the deductible?")],
        [ChatTurn(user="", bot="Hello!"), ChatTurn(user="What is the deductible?")],
    ],
)
async def test_missing_question_fails_before_any_call(retriever, history):
    client = _ScriptedClient()
    orchestrator = AnswerOrchestrator(client, retriever)

    with pytest.raises(InvalidConversationError):
        await orchestrator.reply(history)

    assert client.conversations == []
    retriever.query_documents.assert_not_awaited()


@pytest.mark.anyio
async def test_vector_mode_skips_query_formulation(retriever):
    client = _ScriptedClient([_answer_json()])
    orchestrator = AnswerOrchestrator(client, retriever)
    overrides = RequestOverrides(retrieval_mode="Vector")

    resp = await orchestrator.reply([ChatTurn(user="What is the deductible?")], overrides)

    assert resp.answer == "The deductible is $500 [plan.pdf]."
    assert len(client.conversations) == 1
    assert client.conversations[0].system_prompt == ANSWER_SYSTEM_PROMPT
    retriever.query_documents.assert_awaited_once_with(None, None, overrides)


@pytest.mark.anyio
async def test_other_retrieval_modes_formulate_query(retriever):
    client = _ScriptedClient(["deductible"], [_answer_json()])
    orchestrator = AnswerOrchestrator(client, retriever)

    await orchestrator.reply([ChatTurn(user="What is the deductible?")], RequestOverrides(retrieval_mode="Hybrid"))

    assert client.conversations[0].system_prompt == QUERY_SYSTEM_PROMPT
    assert retriever.query_documents.await_args.args[0] == "deductible"


@pytest.mark.anyio
async def test_embedding_is_passed_through(retriever):
    client = _ScriptedClient([_answer_json()])
    orchestrator = AnswerOrchestrator(client, retriever)
    overrides = RequestOverrides(retrieval_mode="Vector")

    await orchestrator.reply([ChatTurn(user="q")], overrides, embedding=[0.1, 0.2])

    retriever.query_documents.assert_awaited_once_with(None, [0.1, 0.2], overrides)


@pytest.mark.anyio
async def test_retrieval_failure_degrades_to_no_sources():
    failing = MagicMock()
    failing.query_documents = AsyncMock(side_effect=RuntimeError("search down"))
    client = _ScriptedClient(["deductible"], [_answer_json("I don't know", "no sources")])
    orchestrator = AnswerOrchestrator(client, failing)

    resp = await orchestrator.reply([ChatTurn(user="What is the deductible?")])

    assert resp.data_points == []
    assert resp.answer == "I don't know"
    answer_conv = client.conversations[1]
    assert answer_conv.messages[-1]["content"] == ANSWER_FORMAT_PROMPT.format(
        sources="no source available."
    )


@pytest.mark.anyio
async def test_history_replay_pairs_user_and_assistant_messages(retriever):
    client = _ScriptedClient(["co-pay"], [_answer_json()])
    orchestrator = AnswerOrchestrator(client, retriever)
    history = [
        ChatTurn(user="What plans are there?", bot="Standard and Plus."),
        ChatTurn(user="Which covers dental?", bot="Plus [plus.pdf]."),
        ChatTurn(user="What is the co-pay?"),
    ]

    await orchestrator.reply(history)

    messages = client.conversations[1].messages
    assert [m["role"] for m in messages] == ["user", "assistant", "user", "assistant", "user", "user"]
    assert [m["content"] for m in messages[:5]] == [
        "What plans are there?",
        "Standard and Plus.",
        "Which covers dental?",
        "Plus [plus.pdf].",
        "What is the co-pay?",
    ]
    assistant_count = sum(1 for m in messages if m["role"] == "assistant")
    assert assistant_count == sum(1 for t in history if t.bot is not None)
    # The query stage only sees the newest question.
    assert client.conversations[0].messages == [{"role": "user", "content": "What is the co-pay?"}]


@pytest.mark.anyio
async def test_synthesis_missing_thoughts_is_fatal(retriever):
    client = _ScriptedClient(["deductible"], [json.dumps({"answer": "The deductible is $500."})])
    orchestrator = AnswerOrchestrator(client, retriever)

    with pytest.raises(MalformedOutputError) as excinfo:
        await orchestrator.reply([ChatTurn(user="What is the deductible?")])

    assert excinfo.value.stage == "answer"
    assert excinfo.value.field == "thoughts"
    assert excinfo.value.kind == "missing"


@pytest.mark.anyio
async def test_synthesis_with_two_completions_is_fatal(retriever):
    client = _ScriptedClient(["deductible"], [_answer_json(), _answer_json()])
    orchestrator = AnswerOrchestrator(client, retriever)

    with pytest.raises(UnexpectedCompletionCountError) as excinfo:
        await orchestrator.reply([ChatTurn(user="What is the deductible?")])

    assert excinfo.value.stage == "answer"
    assert excinfo.value.count == 2


@pytest.mark.anyio
@pytest.mark.parametrize("candidates", [[], ["a", "b"]])
async def test_query_formulation_requires_exactly_one_completion(retriever, candidates):
    client = _ScriptedClient(candidates)
    orchestrator = AnswerOrchestrator(client, retriever)

    with pytest.raises(UnexpectedCompletionCountError) as excinfo:
        await orchestrator.reply([ChatTurn(user="What is the deductible?")])

    assert excinfo.value.stage == "query"
    assert excinfo.value.count == len(candidates)
    retriever.query_documents.assert_not_awaited()


@pytest.mark.anyio
async def test_malformed_follow_ups_fail_the_request(retriever):
    client = _ScriptedClient(["deductible"], [_answer_json()], ['{"questions": []}'])
    orchestrator = AnswerOrchestrator(client, retriever)

    with pytest.raises(MalformedOutputError) as excinfo:
        await orchestrator.reply(
            [ChatTurn(user="What is the deductible?")],
            RequestOverrides(suggest_follow_up_questions=True),
        )

    assert excinfo.value.stage == "follow_up"
    assert excinfo.value.kind == "not_array"


@pytest.mark.anyio
async def test_cancellation_during_retrieval_propagates():
    started = asyncio.Event()

    async def _hang(*_args, **_kwargs):
        started.set()
        await asyncio.Event().wait()

    hanging = MagicMock()
    hanging.query_documents = _hang
    client = _ScriptedClient(["deductible"], [_answer_json()])
    orchestrator = AnswerOrchestrator(client, hanging)

    task = asyncio.create_task(orchestrator.reply([ChatTurn(user="What is the deductible?")]))
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    # Synthesis never ran.
    assert len(client.conversations) == 1


@pytest.mark.anyio
async def test_history_is_not_mutated(retriever):
    client = _ScriptedClient(["q"], [_answer_json()])
    orchestrator = AnswerOrchestrator(client, retriever)
    history = [ChatTurn(user="Hi", bot="Hello"), ChatTurn(user="What is the deductible?")]
    snapshot = list(history)

    await orchestrator.reply(history)

    assert history == snapshot
