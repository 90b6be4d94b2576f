"""Tests for pathway_service."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pathwise.models import Pathway, PathwayStatus
from pathwise.schemas.identity import SessionIdentity
from pathwise.schemas.results import ActionError
from pathwise.schemas.roadmap import RoadmapAdapter
from pathwise.services import chat_service, pathway_service


def _plan(*names: str):
    return RoadmapAdapter.validate_python(
        [{"type": "TOPIC", "name": name, "subtopics": []} for name in names]
    )


@pytest.mark.asyncio
async def test_first_save_creates_draft(test_session: AsyncSession, alice: SessionIdentity):
    chat = await chat_service.create_chat(test_session, alice)

    saved = await pathway_service.save_plan_as_pathway(
        test_session, alice, chat.chat_id, plan=_plan("Algebra")
    )

    assert saved.created is True
    result = await pathway_service.get_chat_pathway(test_session, alice, chat.chat_id)
    assert result.pathway.id == saved.pathway_id
    assert result.pathway.status == PathwayStatus.DRAFT
    assert result.pathway.title is None
    assert [t.name for t in result.pathway.plan_spec] == ["Algebra"]


@pytest.mark.asyncio
async def test_second_save_updates_same_row(test_session: AsyncSession, alice: SessionIdentity):
    chat = await chat_service.create_chat(test_session, alice)

    first = await pathway_service.save_plan_as_pathway(
        test_session,
        alice,
        chat.chat_id,
        plan=_plan("Algebra"),
        title="Math",
        status=PathwayStatus.ACTIVE,
    )
    second = await pathway_service.save_plan_as_pathway(
        test_session, alice, chat.chat_id, plan=_plan("Geometry", "Calculus")
    )

    assert second.created is False
    assert second.pathway_id == first.pathway_id

    count = await test_session.execute(
        select(func.count()).select_from(Pathway).where(Pathway.chat_id == chat.chat_id)
    )
    assert count.scalar_one() == 1

    pathway = (await pathway_service.get_chat_pathway(test_session, alice, chat.chat_id)).pathway
    assert [t.name for t in pathway.plan_spec] == ["Geometry", "Calculus"]
    # omitted title/status are left alone
    assert pathway.title == "Math"
    assert pathway.status == PathwayStatus.ACTIVE


@pytest.mark.asyncio
async def test_update_overwrites_given_fields(test_session: AsyncSession, alice: SessionIdentity):
    chat = await chat_service.create_chat(test_session, alice)
    await pathway_service.save_plan_as_pathway(
        test_session, alice, chat.chat_id, plan=_plan("A"), title="Old"
    )
    await pathway_service.save_plan_as_pathway(
        test_session,
        alice,
        chat.chat_id,
        plan=_plan("A"),
        title="New",
        status=PathwayStatus.COMPLETED,
    )

    pathway = (await pathway_service.get_chat_pathway(test_session, alice, chat.chat_id)).pathway
    assert pathway.title == "New"
    assert pathway.status == PathwayStatus.COMPLETED


@pytest.mark.asyncio
async def test_chat_without_pathway(test_session: AsyncSession, alice: SessionIdentity):
    chat = await chat_service.create_chat(test_session, alice)

    result = await pathway_service.get_chat_pathway(test_session, alice, chat.chat_id)
    assert result.ok is True
    assert result.pathway is None


@pytest.mark.asyncio
async def test_foreign_chat_is_rejected(
    test_session: AsyncSession, alice: SessionIdentity, bob: SessionIdentity
):
    chat = await chat_service.create_chat(test_session, alice)

    saved = await pathway_service.save_plan_as_pathway(
        test_session, bob, chat.chat_id, plan=_plan("Hijack")
    )
    fetched = await pathway_service.get_chat_pathway(test_session, bob, chat.chat_id)

    assert isinstance(saved, ActionError)
    assert isinstance(fetched, ActionError)
    assert await pathway_service.get_pathway_by_chat(test_session, chat.chat_id) is None
