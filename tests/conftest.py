#!/usr/bin/env python
"""
pytest configuration file

This file contains shared fixtures for all tests.
"""

import os

# Must be set before timekeeper.settings is imported
os.environ.setdefault("TIMEKEEPER_ENVIRONMENT", "test")
os.environ.setdefault("TIMEKEEPER_DEBUG", "false")

import pytest
from sqlalchemy.orm import sessionmaker

from timekeeper.db.database import create_db_engine
from timekeeper.db.models import Base
from timekeeper.models.auth_schemas import AuthenticatedUser
from timekeeper.models.schemas import Entry, Folder, Module, Profile, StatePayload, TimeTrackingState


def make_entry(
    entry_id: str,
    module_id: str,
    hours: float,
    day: str,
    activity: str = "Reading",
    description: str | None = None,
) -> Entry:
    return Entry(
        id=entry_id,
        moduleId=module_id,
        activityType=activity,
        description=description,
        durationHours=hours,
        timestamp=day,
        createdAt=f"{day}T08:00:00+00:00",
    )


@pytest.fixture
def sample_folders() -> list[Folder]:
    """A(root) with children A1 (order 0) and A2 (order 1), listed out of order"""
    return [
        Folder(id="A2", name="A2", parentId="A", order=1),
        Folder(id="A", name="A", parentId=None, order=0),
        Folder(id="A1", name="A1", parentId="A", order=0),
    ]


@pytest.fixture
def sample_modules() -> list[Module]:
    return [
        Module(id="M1", name="Thesis", folderId="A1", targetHours=10, order=0),
        Module(id="M2", name="Exam prep", folderId="A2", order=0),
    ]


@pytest.fixture
def sample_entries() -> list[Entry]:
    """M1 totals 3.5h, M2 totals 2h"""
    return [
        make_entry("e1", "M1", 2.0, "2024-03-01"),
        make_entry("e2", "M1", 1.5, "2024-03-03", activity="Writing"),
        make_entry("e3", "M2", 2.0, "2024-03-02"),
    ]


@pytest.fixture
def sample_state(sample_folders, sample_modules, sample_entries) -> TimeTrackingState:
    return TimeTrackingState(folders=sample_folders, modules=sample_modules, entries=sample_entries)


@pytest.fixture
def sample_payload(sample_state) -> StatePayload:
    return StatePayload(
        profile=Profile(userId="user_1", email="ada@timekeeper.dev"),
        folders=sample_state.folders,
        modules=sample_state.modules,
        entries=sample_state.entries,
    )


@pytest.fixture
def test_user() -> AuthenticatedUser:
    return AuthenticatedUser(id="user_1", email="ada@timekeeper.dev", accessToken="token-1")


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared by every session of one test."""
    engine = create_db_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def entry_factory():
    """Build Entry objects: entry_factory("e1", "M1", 1.5, "2024-03-01")"""
    return make_entry
