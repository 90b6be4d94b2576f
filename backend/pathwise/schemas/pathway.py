"""Pathway schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from pathwise.models.pathway import PathwayStatus
from pathwise.schemas.results import ActionOk
from pathwise.schemas.roadmap import Roadmap


class PathwaySave(BaseModel):
    """Save a chat's roadmap as its pathway.

    Omitted ``title``/``status`` keep the stored values on update.
    """

    plan: Roadmap
    title: str | None = None
    status: PathwayStatus | None = None


class PathwayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    chat_id: str
    title: str | None
    status: PathwayStatus
    plan_spec: Roadmap
    created_at: datetime
    updated_at: datetime


class PathwaySaved(ActionOk):
    pathway_id: int
    created: bool


class PathwayResult(ActionOk):
    pathway: PathwayResponse | None
