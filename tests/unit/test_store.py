"""Tests for TimeTrackingStore with a mocked remote client."""

import asyncio
from unittest.mock import MagicMock

import pytest

from timekeeper.components.remote import TimeTrackingClient
from timekeeper.errors import AuthorizationError, FolderCycleError, RemoteError
from timekeeper.models.auth_schemas import AuthenticatedUser
from timekeeper.models.schemas import (
    CreateEntryRequest,
    CreateFolderRequest,
    CreateTimerSessionRequest,
    Folder,
    StatePayload,
    TimerSession,
    UpdateFolderRequest,
    UpdateProfileRequest,
)
from timekeeper.services.store import TimeTrackingStore


@pytest.fixture
def client(sample_payload):
    mock = MagicMock(spec=TimeTrackingClient)
    mock.fetch_state.return_value = sample_payload
    return mock


@pytest.fixture
async def store(client, test_user):
    store = TimeTrackingStore(client, serialize_mutations=True)
    await store.set_user(test_user)
    return store


def entry_request(module_id: str = "M1", hours: float = 1.0) -> CreateEntryRequest:
    return CreateEntryRequest(moduleId=module_id, activityType="Reading", durationHours=hours, timestamp="2024-03-04")


class TestSession:
    """Test loading and clearing on authentication changes."""

    async def test_set_user_loads_snapshot(self, store, client):
        assert store.initialized is True
        assert store.loading is False
        assert store.error is None
        assert store.profile.userId == "user_1"
        assert len(store.state.folders) == 3
        assert store.version == 1
        client.set_access_token.assert_called_with("token-1")

    async def test_same_user_does_not_refetch(self, store, client, test_user):
        await store.set_user(test_user.model_copy(update={"accessToken": "token-2"}))

        assert client.fetch_state.await_count == 1
        client.set_access_token.assert_called_with("token-2")

    async def test_sign_out_clears(self, store, client):
        await store.sign_out()

        assert store.user is None
        assert store.profile is None
        assert store.state.folders == []
        assert store.initialized is False
        client.set_access_token.assert_called_with(None)

    async def test_sign_in(self, client, test_user):
        client.login.return_value = test_user
        store = TimeTrackingStore(client)

        user = await store.sign_in("ada@timekeeper.dev", "secret1")

        assert user.id == "user_1"
        assert store.initialized is True
        client.login.assert_awaited_once_with("ada@timekeeper.dev", "secret1")

    async def test_refresh_failure_does_not_raise(self, client, test_user):
        client.fetch_state.side_effect = RemoteError("Could not load tracking data.", 503)
        store = TimeTrackingStore(client)

        await store.set_user(test_user)

        assert store.error == "Could not load tracking data."
        assert store.initialized is True
        assert store.loading is False
        assert store.state.entries == []


class TestDerivedCache:
    """Test memoized derived views."""

    async def test_same_snapshot_same_derived(self, store):
        assert store.derived is store.derived

    async def test_new_snapshot_recomputes(self, store, client):
        first = store.derived
        client.create_folder.return_value = Folder(id="B", name="B", order=1)
        await store.add_folder(CreateFolderRequest(name="B"))

        assert store.derived is not first
        assert [n.id for n in store.derived.folder_tree] == ["A", "B"]


class TestMutations:
    """Test snapshot reconciliation after remote mutations."""

    async def test_requires_user(self, client):
        store = TimeTrackingStore(client)

        with pytest.raises(AuthorizationError, match="Please sign in"):
            await store.add_entry(entry_request())

        client.create_entry.assert_not_called()

    async def test_add_entry_prepends(self, store, client, entry_factory):
        created = entry_factory("e4", "M1", 1.0, "2024-03-04")
        client.create_entry.return_value = created
        before = store.state

        await store.add_entry(entry_request())

        assert store.state is not before
        assert [e.id for e in store.state.entries] == ["e4", "e1", "e2", "e3"]
        assert before.entries[0].id == "e1"
        assert store.derived.total_tracked_hours == 6.5

    async def test_add_folder_appends(self, store, client):
        client.create_folder.return_value = Folder(id="B", name="B", order=1)

        folder = await store.add_folder(CreateFolderRequest(name="B"))

        assert folder.id == "B"
        assert store.state.folders[-1].id == "B"

    async def test_update_folder_replaces_by_id(self, store, client):
        client.update_folder.return_value = Folder(id="A2", name="Renamed", parentId="A", order=1)

        await store.update_folder("A2", UpdateFolderRequest(name="Renamed"))

        names = {f.id: f.name for f in store.state.folders}
        assert names["A2"] == "Renamed"
        assert len(store.state.folders) == 3

    async def test_cycle_rejected_before_request(self, store, client):
        with pytest.raises(FolderCycleError):
            await store.update_folder("A", UpdateFolderRequest(parentId="A1"))

        client.update_folder.assert_not_called()
        assert store.error is not None

    async def test_move_to_root_allowed(self, store, client):
        client.update_folder.return_value = Folder(id="A1", name="A1", parentId=None, order=1)

        await store.update_folder("A1", UpdateFolderRequest(parentId=None))

        assert {n.id for n in store.derived.folder_tree} == {"A", "A1"}

    async def test_delete_folder_refreshes(self, store, client, sample_payload):
        remaining = StatePayload(
            profile=sample_payload.profile,
            folders=[f for f in sample_payload.folders if f.id != "A1"],
            modules=[m for m in sample_payload.modules if m.id != "M1"],
            entries=[e for e in sample_payload.entries if e.moduleId != "M1"],
        )
        client.fetch_state.return_value = remaining

        await store.delete_folder("A1")

        client.delete_folder.assert_awaited_once_with("A1")
        assert store.derived.get_module_by_id("M1") is None
        assert store.derived.folder_tree[0].totalHours == 2.0
        assert store.loading is False

    async def test_delete_entry_removes_locally(self, store, client):
        client.delete_entry.return_value = None

        await store.delete_entry("e2")

        assert [e.id for e in store.state.entries] == ["e1", "e3"]
        assert client.fetch_state.await_count == 1

    async def test_failure_keeps_snapshot(self, store, client):
        client.create_entry.side_effect = RemoteError("Module not found: M9", 404)
        before = store.state

        with pytest.raises(RemoteError):
            await store.add_entry(entry_request("M9"))

        assert store.state is before
        assert store.error == "Module not found: M9"
        assert store.is_mutating is False

    async def test_update_profile(self, store, client, sample_payload):
        updated = sample_payload.profile.model_copy(update={"timezone": "UTC"})
        client.upsert_profile.return_value = updated

        await store.update_profile(UpdateProfileRequest(timezone="UTC"))

        assert store.profile.timezone == "UTC"

    async def test_record_timer_session_leaves_snapshot(self, store, client):
        client.create_timer_session.return_value = TimerSession(
            id="timer_1",
            moduleId="M1",
            startedAt="2024-03-01T09:00:00+00:00",
            durationSeconds=1500,
            createdAt="2024-03-01T09:25:00+00:00",
        )
        before = store.state

        session = await store.record_timer_session(
            CreateTimerSessionRequest(moduleId="M1", startedAt="2024-03-01T09:00:00+00:00", durationSeconds=1500)
        )

        assert session.durationSeconds == 1500
        assert store.state is before


class TestConcurrency:
    """Test in-flight tracking, ordering and liveness."""

    async def test_is_mutating_counts_in_flight_calls(self, client, test_user, entry_factory):
        store = TimeTrackingStore(client, serialize_mutations=False)
        await store.set_user(test_user)
        gate = asyncio.Event()

        async def create_entry(request):
            await gate.wait()
            return entry_factory(f"new-{request.durationHours}", "M1", request.durationHours, "2024-03-04")

        client.create_entry.side_effect = create_entry
        first = asyncio.create_task(store.add_entry(entry_request(hours=1.0)))
        second = asyncio.create_task(store.add_entry(entry_request(hours=2.0)))
        await asyncio.sleep(0)

        assert store.is_mutating is True
        gate.set()
        await asyncio.gather(first, second)
        assert store.is_mutating is False

    async def test_unserialized_results_apply_in_arrival_order(self, client, test_user, entry_factory):
        store = TimeTrackingStore(client, serialize_mutations=False)
        await store.set_user(test_user)
        gates = {1.0: asyncio.Event(), 2.0: asyncio.Event()}

        async def create_entry(request):
            await gates[request.durationHours].wait()
            return entry_factory(f"new-{request.durationHours}", "M1", request.durationHours, "2024-03-04")

        client.create_entry.side_effect = create_entry
        first = asyncio.create_task(store.add_entry(entry_request(hours=1.0)))
        second = asyncio.create_task(store.add_entry(entry_request(hours=2.0)))
        await asyncio.sleep(0)

        gates[2.0].set()
        await second
        gates[1.0].set()
        await first

        assert [e.id for e in store.state.entries[:2]] == ["new-1.0", "new-2.0"]

    async def test_serialized_mutations_run_one_at_a_time(self, store, client, entry_factory):
        started = []
        gate = asyncio.Event()

        async def create_entry(request):
            started.append(request.durationHours)
            if request.durationHours == 1.0:
                await gate.wait()
            return entry_factory(f"new-{request.durationHours}", "M1", request.durationHours, "2024-03-04")

        client.create_entry.side_effect = create_entry
        first = asyncio.create_task(store.add_entry(entry_request(hours=1.0)))
        second = asyncio.create_task(store.add_entry(entry_request(hours=2.0)))
        await asyncio.sleep(0.01)

        assert started == [1.0]
        gate.set()
        await asyncio.gather(first, second)
        assert started == [1.0, 2.0]
        assert [e.id for e in store.state.entries[:2]] == ["new-2.0", "new-1.0"]

    async def test_dispose_discards_pending_refresh(self, client, test_user, sample_payload):
        gate = asyncio.Event()

        async def fetch_state():
            await gate.wait()
            return sample_payload

        client.fetch_state.side_effect = fetch_state
        store = TimeTrackingStore(client)
        task = asyncio.create_task(store.set_user(test_user))
        await asyncio.sleep(0)

        store.dispose()
        gate.set()
        await task

        assert store.alive is False
        assert store.state.folders == []
        assert store.initialized is False

    async def test_queued_mutation_not_sent_after_user_change(self, store, client, sample_payload):
        """A mutation waiting on the lock is dropped once another user signs in."""
        gate = asyncio.Event()

        async def delete_entry(entry_id):
            await gate.wait()

        client.delete_entry.side_effect = delete_entry
        running = asyncio.create_task(store.delete_entry("e1"))
        queued = asyncio.create_task(store.add_folder(CreateFolderRequest(name="Late")))
        await asyncio.sleep(0)

        other = AuthenticatedUser(id="user_2", email="grace@timekeeper.dev", accessToken="token-2")
        await store.set_user(other)
        gate.set()
        await running

        with pytest.raises(AuthorizationError):
            await queued
        client.create_folder.assert_not_called()
        assert store.user.id == "user_2"
        assert len(store.state.folders) == len(sample_payload.folders)
        assert store.is_mutating is False

    async def test_sign_out_discards_pending_mutation(self, store, client):
        gate = asyncio.Event()

        async def create_folder(request):
            await gate.wait()
            return Folder(id="B", name=request.name, order=1)

        client.create_folder.side_effect = create_folder
        task = asyncio.create_task(store.add_folder(CreateFolderRequest(name="B")))
        await asyncio.sleep(0)

        await store.sign_out()
        gate.set()
        await task

        assert store.state.folders == []
