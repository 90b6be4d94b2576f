"""Tests for the tutor exchange (graph + persistence)."""

import json

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from pathwise.models import Chat, PathwayStatus
from pathwise.schemas.chat import ChatMeta
from pathwise.schemas.identity import SessionIdentity
from pathwise.schemas.results import ActionError
from pathwise.services import chat_service, pathway_service, turn_service

ROADMAP = [
    {
        "type": "TOPIC",
        "name": "Ownership",
        "subtopics": [{"type": "SUBTOPIC", "name": "Borrowing"}],
    },
    {"type": "TOPIC", "name": "Traits", "subtopics": []},
]


async def _stored_meta(db: AsyncSession, chat_id: str) -> ChatMeta:
    chat = await db.get(Chat, chat_id)
    return ChatMeta.load(chat.meta)


class TestRoadmapRequest:
    @pytest.mark.asyncio
    async def test_roadmap_is_stored_and_saved_as_pathway(
        self, test_session: AsyncSession, alice: SessionIdentity, tutor_client_factory
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/ask"
            return httpx.Response(200, text=f"Here is a plan:\n{json.dumps(ROADMAP)}")

        chat = await chat_service.create_chat(test_session, alice)
        async with tutor_client_factory(handler) as client:
            result = await turn_service.send_message(
                test_session, alice, chat.chat_id, "I want to learn Rust", client=client
            )

        assert result.upstream_error is None
        assert result.ai_message.content == (
            "I created a roadmap (Ownership → Traits). Click a topic to explore subtopics."
        )
        assert [t.name for t in result.roadmap] == ["Ownership", "Traits"]

        meta = await _stored_meta(test_session, chat.chat_id)
        assert [m.role for m in meta.messages] == ["user", "ai"]
        assert meta.messages[0].content == "I want to learn Rust"
        assert [t.name for t in meta.roadmap] == ["Ownership", "Traits"]

        saved = await pathway_service.get_chat_pathway(test_session, alice, chat.chat_id)
        pathway = saved.pathway
        assert pathway.id == result.pathway_id
        assert pathway.title == "Learning Path"
        assert pathway.status == PathwayStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_reply_without_roadmap_is_kept_verbatim(
        self, test_session: AsyncSession, alice: SessionIdentity, tutor_client_factory
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="Could you narrow it down?")

        chat = await chat_service.create_chat(test_session, alice)
        async with tutor_client_factory(handler) as client:
            result = await turn_service.send_message(
                test_session, alice, chat.chat_id, "Give me a study plan", client=client
            )

        assert result.ai_message.content == "Could you narrow it down?"
        assert result.roadmap is None
        assert result.pathway_id is None
        assert await pathway_service.get_pathway_by_chat(test_session, chat.chat_id) is None


class TestGeneralChat:
    @pytest.mark.asyncio
    async def test_transcript_is_sent_with_query(
        self, test_session: AsyncSession, alice: SessionIdentity, tutor_client_factory
    ):
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/general"
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"text": "A closure captures its environment."})

        chat = await chat_service.create_chat(test_session, alice)
        async with tutor_client_factory(handler) as client:
            first = await turn_service.send_message(
                test_session, alice, chat.chat_id, "What is a closure?", client=client
            )
            await turn_service.send_message(
                test_session, alice, chat.chat_id, "And a thunk?", client=client
            )

        assert first.ai_message.content == "A closure captures its environment."
        assert first.roadmap is None

        first_body, second_body = bodies
        assert first_body["query"] == "What is a closure?"
        assert first_body["metadata"]["events"] == []
        assert first_body["metadata"]["roadmap"] == []
        assert [m["content"] for m in first_body["metadata"]["messages"]] == ["What is a closure?"]
        assert [m["content"] for m in second_body["metadata"]["messages"]] == [
            "What is a closure?",
            "A closure captures its environment.",
            "And a thunk?",
        ]

    @pytest.mark.asyncio
    async def test_embedded_roadmap_in_chat_reply(
        self, test_session: AsyncSession, alice: SessionIdentity, tutor_client_factory
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=f"Updated plan:\n{json.dumps(ROADMAP)}\nEnjoy!")

        chat = await chat_service.create_chat(test_session, alice)
        async with tutor_client_factory(handler) as client:
            result = await turn_service.send_message(
                test_session, alice, chat.chat_id, "Add traits please", client=client
            )

        assert result.ai_message.content == "Updated plan:\n\nEnjoy!"
        assert result.roadmap is not None
        assert result.pathway_id is not None


class TestFailures:
    @pytest.mark.asyncio
    async def test_upstream_error_is_persisted_as_reply(
        self, test_session: AsyncSession, alice: SessionIdentity, tutor_client_factory
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="tunnel down")

        chat = await chat_service.create_chat(test_session, alice, initial_roadmap=None)
        async with tutor_client_factory(handler) as client:
            result = await turn_service.send_message(
                test_session, alice, chat.chat_id, "I want to learn Go", client=client
            )

        assert result.ok is True
        assert result.upstream_error == "Backend error 503: tunnel down"
        assert result.ai_message.content == (
            "Could not reach server:\n\nBackend error 503: tunnel down"
        )
        assert result.roadmap is None

        meta = await _stored_meta(test_session, chat.chat_id)
        assert meta.messages[-1].content == result.ai_message.content
        assert await pathway_service.get_pathway_by_chat(test_session, chat.chat_id) is None

    @pytest.mark.asyncio
    async def test_foreign_chat_never_reaches_tutor(
        self,
        test_session: AsyncSession,
        alice: SessionIdentity,
        bob: SessionIdentity,
        tutor_client_factory,
    ):
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, text="hello")

        chat = await chat_service.create_chat(test_session, alice)
        async with tutor_client_factory(handler) as client:
            result = await turn_service.send_message(
                test_session, bob, chat.chat_id, "hi", client=client
            )

        assert isinstance(result, ActionError)
        assert calls == []
