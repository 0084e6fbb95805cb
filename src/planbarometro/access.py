"""Role checks and group membership for collaborative studies."""

from __future__ import annotations

import secrets
import string
from typing import Iterable

import structlog

from .schemas import DelphiStudy, Group, StudyParticipant, User
from .schemas.accounts import ParticipantRole, UserRole

JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits
JOIN_CODE_LENGTH = 6
STAFF_ROLES: tuple[UserRole, ...] = ("admin", "coordinator")


class AccessDeniedError(PermissionError):
    """Raised before any mutation when a user lacks the required role."""


def require_role(user: User | None, roles: Iterable[UserRole]) -> User:
    allowed = tuple(roles)
    if user is None:
        raise AccessDeniedError("Authentication required")
    if user.role not in allowed:
        raise AccessDeniedError(
            f"User {user.username!r} with role {user.role!r} needs one of {allowed}"
        )
    return user


def can_view_responses(viewer: User, owner_id: int) -> bool:
    return viewer.id == owner_id or viewer.role in STAFF_ROLES


class GroupDirectory:
    """Groups, memberships and studies kept in memory."""

    def __init__(self) -> None:
        self._groups: dict[int, Group] = {}
        self._members: dict[int, set[int]] = {}
        self._studies: dict[int, DelphiStudy] = {}
        self._participants: list[StudyParticipant] = []
        self._logger = structlog.get_logger(__name__)

    def create_group(self, user: User | None, name: str, description: str | None = None) -> Group:
        coordinator = require_role(user, STAFF_ROLES)
        if not name.strip():
            raise ValueError("Group name is required")
        group = Group(
            id=len(self._groups) + 1,
            name=name.strip(),
            code=self._unique_code(),
            coordinator_id=coordinator.id,
            description=description,
        )
        self._groups[group.id] = group
        self._members[group.id] = {coordinator.id}
        self._logger.info("group.created", group_id=group.id, coordinator_id=coordinator.id)
        return group

    def join(self, user: User, code: str) -> Group:
        normalized = code.strip().upper()
        for group in self._groups.values():
            if group.code == normalized:
                self._members[group.id].add(user.id)
                return group
        raise KeyError(f"Unknown group code: {code!r}")

    def groups_for(self, user: User) -> list[Group]:
        if user.role == "admin":
            return list(self._groups.values())
        if user.role == "coordinator":
            return [group for group in self._groups.values() if group.coordinator_id == user.id]
        return [
            group
            for group in self._groups.values()
            if user.id in self._members.get(group.id, set())
        ]

    def create_study(self, user: User | None, group_id: int, title: str = "") -> DelphiStudy:
        coordinator = require_role(user, STAFF_ROLES)
        group = self._groups.get(group_id)
        if group is None:
            raise KeyError(f"Unknown group: {group_id}")
        if coordinator.role != "admin" and group.coordinator_id != coordinator.id:
            raise AccessDeniedError("Only the group coordinator can create studies")
        study = DelphiStudy(id=len(self._studies) + 1, group_id=group_id, title=title)
        self._studies[study.id] = study
        self._logger.info("study.created", study_id=study.id, group_id=group_id)
        return study

    def add_participant(
        self,
        user: User | None,
        study_id: int,
        participant_id: int,
        role: ParticipantRole = "participant",
    ) -> StudyParticipant:
        coordinator = require_role(user, STAFF_ROLES)
        study = self._studies.get(study_id)
        if study is None:
            raise KeyError(f"Unknown study: {study_id}")
        group = self._groups[study.group_id]
        if coordinator.role != "admin" and group.coordinator_id != coordinator.id:
            raise AccessDeniedError("Only the group coordinator can manage participants")
        participant = StudyParticipant(study_id=study_id, user_id=participant_id, role=role)
        self._participants.append(participant)
        return participant

    def participants(self, study_id: int) -> list[StudyParticipant]:
        return [item for item in self._participants if item.study_id == study_id]

    def _unique_code(self) -> str:
        existing = {group.code for group in self._groups.values()}
        while True:
            code = "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(JOIN_CODE_LENGTH))
            if code not in existing:
                return code
