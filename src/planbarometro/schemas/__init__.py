"""Pydantic schema definitions shared by the engine and its collaborators."""

from __future__ import annotations

from .accounts import DelphiStudy, Group, StudyParticipant, User
from .alerts import (
    SEVERITIES,
    AlertMetrics,
    CustomAlertForm,
    Severity,
    StrategicAlert,
)
from .evaluation import Evaluation
from .model import AssessmentModel, Criterion, Dimension, Element
from .policy import BestPractice, PolicyExample

__all__ = [
    "AlertMetrics",
    "AssessmentModel",
    "BestPractice",
    "Criterion",
    "CustomAlertForm",
    "DelphiStudy",
    "Dimension",
    "Element",
    "Evaluation",
    "Group",
    "PolicyExample",
    "SEVERITIES",
    "Severity",
    "StrategicAlert",
    "StudyParticipant",
    "User",
]
