"""Complaint box service layer -- classifier, persistence, sessions, lifecycle and queue views."""

from __future__ import annotations

from src.services.access import AccessPolicy, Capability, RoleAccessPolicy, SessionManager
from src.services.classifier import ComplaintIdGenerator, KeywordClassifier, classify, generate_complaint_id
from src.services.lifecycle import ComplaintLifecycle
from src.services.queue import compute_stats, project, student_view
from src.services.record_store import (
    InMemoryRecordStore,
    JsonFileRecordStore,
    RecordStore,
    RedisRecordStore,
    create_record_store,
)
from src.services.storage import RecordStorage

__all__ = [
    "AccessPolicy",
    "Capability",
    "ComplaintIdGenerator",
    "ComplaintLifecycle",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "KeywordClassifier",
    "RecordStorage",
    "RecordStore",
    "RedisRecordStore",
    "RoleAccessPolicy",
    "SessionManager",
    "classify",
    "compute_stats",
    "create_record_store",
    "generate_complaint_id",
    "project",
    "student_view",
]
