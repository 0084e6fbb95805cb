"""Account and collaboration records consumed by the access gate."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

UserRole = Literal["admin", "coordinator", "user"]
ParticipantRole = Literal["participant", "expert", "observer"]
StudyStatus = Literal["draft", "active", "completed", "archived"]
ParticipantStatus = Literal["invited", "active", "completed", "withdrawn"]


class User(BaseModel):
    id: int
    username: str
    email: str | None = None
    role: UserRole = "user"

    model_config = ConfigDict(extra="forbid")


class Group(BaseModel):
    id: int
    name: str
    code: str
    coordinator_id: int
    description: str | None = None

    model_config = ConfigDict(extra="forbid")


class DelphiStudy(BaseModel):
    """Multi-round study placeholder; rounds are not modelled."""

    id: int
    group_id: int
    title: str = ""
    status: StudyStatus = "draft"

    model_config = ConfigDict(extra="forbid")


class StudyParticipant(BaseModel):
    study_id: int
    user_id: int
    role: ParticipantRole = "participant"
    status: ParticipantStatus = "invited"

    model_config = ConfigDict(extra="forbid")
