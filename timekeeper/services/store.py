"""Entity store: the client-side snapshot of one user's tracking data.

The store owns the current TimeTrackingState plus the user's profile, keeps it
in sync with the tracking API through a TimeTrackingClient, and exposes the
memoized derived views. Every change swaps in a new snapshot object; readers
never see a partially updated snapshot.
"""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from typing import TypeVar

from timekeeper.components.remote import TimeTrackingClient
from timekeeper.components.tracking import DerivationCache, DerivedState, would_create_cycle
from timekeeper.errors import AuthorizationError, FolderCycleError, TimeTrackingError
from timekeeper.models.auth_schemas import AuthenticatedUser
from timekeeper.models.schemas import (
    CreateEntryRequest,
    CreateFolderRequest,
    CreateModuleRequest,
    CreateTimerSessionRequest,
    Entry,
    Folder,
    Module,
    Profile,
    TimerSession,
    TimeTrackingState,
    UpdateEntryRequest,
    UpdateFolderRequest,
    UpdateModuleRequest,
    UpdateProfileRequest,
)
from timekeeper.settings import settings
from timekeeper.utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def _replace_by_id(items: list[T], updated: T) -> list[T]:
    return [updated if item.id == updated.id else item for item in items]


class TimeTrackingStore:
    """Snapshot holder with remote reconciliation.

    Attributes:
        loading: True while a spinner-visible refresh is in flight
        initialized: True once a refresh has finished (successfully or not)
        error: Message of the last failed operation, cleared on the next one
        version: Incremented on every snapshot swap
    """

    def __init__(
        self,
        client: TimeTrackingClient,
        serialize_mutations: bool | None = None,
        cache: DerivationCache | None = None,
    ):
        self._client = client
        self._serialize = settings.serialize_mutations if serialize_mutations is None else serialize_mutations
        self._mutation_lock = asyncio.Lock()
        self._cache = cache or DerivationCache()

        self._state = TimeTrackingState()
        self._profile: Profile | None = None
        self._user: AuthenticatedUser | None = None

        self.loading = False
        self.initialized = False
        self.error: str | None = None
        self.version = 0

        self._in_flight = 0
        self._alive = True
        self._generation = 0

    # ==================== Read side ====================

    @property
    def state(self) -> TimeTrackingState:
        return self._state

    @property
    def profile(self) -> Profile | None:
        return self._profile

    @property
    def user(self) -> AuthenticatedUser | None:
        return self._user

    @property
    def is_mutating(self) -> bool:
        return self._in_flight > 0

    @property
    def alive(self) -> bool:
        return self._alive

    @property
    def derived(self) -> DerivedState:
        """Derived views of the current snapshot, recomputed only when it changes.

        Raises:
            DataIntegrityError: If the snapshot references a missing folder
        """
        return self._cache.get(self._state)

    # ==================== Session ====================

    async def set_user(self, user: AuthenticatedUser | None) -> None:
        """Apply an authentication change.

        A new identity starts a new session and loads its snapshot; clearing
        the user empties the store. Re-sending the same identity (for example
        with a refreshed token) only updates the token.
        """
        if not self._alive:
            return

        same_identity = self._user is not None and user is not None and self._user.id == user.id
        self._user = user
        self._client.set_access_token(user.accessToken if user else None)
        if same_identity:
            return

        self._generation += 1
        if user is None:
            self._swap(TimeTrackingState())
            self._profile = None
            self.initialized = False
            self.loading = False
            self.error = None
            logger.info("Tracking store cleared (signed out)")
            return

        logger.info(f"Tracking session started for user {user.id}")
        await self.refresh(with_spinner=True)

    async def sign_in(self, email: str, password: str) -> AuthenticatedUser:
        user = await self._client.login(email, password)
        await self.set_user(user)
        return user

    async def sign_out(self) -> None:
        await self.set_user(None)

    def dispose(self) -> None:
        """Tear the store down. Results of calls still in flight are discarded."""
        self._alive = False
        self._generation += 1
        self._cache.clear()
        logger.debug("Tracking store disposed")

    def _is_current(self, generation: int) -> bool:
        return self._alive and generation == self._generation

    def _swap(self, state: TimeTrackingState) -> None:
        self._state = state
        self.version += 1

    def _require_user(self, action: str) -> None:
        if self._user is None:
            raise AuthorizationError(f"Please sign in to {action}.")

    # ==================== Refresh ====================

    async def refresh(self, with_spinner: bool = True) -> None:
        """Reload the full snapshot and profile.

        Failures never raise: the store records the error, falls back to an
        empty snapshot and still marks itself initialized.
        """
        if not self._alive:
            return
        if self._user is None:
            self._swap(TimeTrackingState())
            self._profile = None
            self.initialized = False
            self.loading = False
            return

        generation = self._generation
        if with_spinner:
            self.loading = True
        self.error = None

        try:
            payload = await self._client.fetch_state()
        except TimeTrackingError as e:
            if self._is_current(generation):
                logger.error(f"Failed to load tracking state: {e.message}")
                self.error = e.message
                self._swap(TimeTrackingState())
                self._profile = None
                self.initialized = True
            return
        finally:
            if with_spinner and self._is_current(generation):
                self.loading = False

        if not self._is_current(generation):
            logger.debug("Discarding stale tracking state")
            return

        self._swap(
            TimeTrackingState(folders=payload.folders, modules=payload.modules, entries=payload.entries)
        )
        self._profile = payload.profile
        self.initialized = True
        logger.debug(
            f"Tracking state loaded: {len(payload.folders)} folders, "
            f"{len(payload.modules)} modules, {len(payload.entries)} entries"
        )

    # ==================== Mutation plumbing ====================

    def _mutation_guard(self):
        if self._serialize:
            return self._mutation_lock
        return contextlib.nullcontext()

    async def _mutate(
        self,
        action: str,
        operation: Callable[[], Awaitable[T]],
        reconcile: Callable[[T], None] | None = None,
        refresh_after: bool = False,
    ) -> T:
        """Run one remote mutation and reconcile its result into the snapshot.

        Raises:
            AuthorizationError: If no user is signed in, or the session that
                issued the call ended while it waited for the lock (nothing is sent)
            TimeTrackingError: If the remote call fails; the snapshot is untouched
        """
        self._require_user(action)
        generation = self._generation

        self._in_flight += 1
        try:
            async with self._mutation_guard():
                # The session may have ended while queued; never send with another user's token
                if not self._is_current(generation):
                    logger.warning(f"Dropped queued '{action}': session ended before it was sent")
                    raise AuthorizationError(f"Please sign in to {action}.")
                self.error = None
                try:
                    result = await operation()
                except TimeTrackingError as e:
                    if self._is_current(generation):
                        self.error = e.message
                    logger.warning(f"Failed to {action}: {e.message}")
                    raise

                if not self._is_current(generation):
                    logger.debug(f"Discarding result of '{action}' from a finished session")
                    return result
                if reconcile is not None:
                    reconcile(result)
                if refresh_after:
                    await self.refresh(with_spinner=False)
                return result
        finally:
            self._in_flight -= 1

    # ==================== Folders ====================

    async def add_folder(self, request: CreateFolderRequest) -> Folder:
        def reconcile(folder: Folder) -> None:
            self._swap(self._state.model_copy(update={"folders": [*self._state.folders, folder]}))

        return await self._mutate("create folders", lambda: self._client.create_folder(request), reconcile)

    async def update_folder(self, folder_id: str, request: UpdateFolderRequest) -> Folder:
        self._require_user("edit folders")
        if "parentId" in request.model_fields_set and would_create_cycle(
            self._state.folders, folder_id, request.parentId
        ):
            self.error = "A folder cannot be moved into itself or one of its subfolders."
            raise FolderCycleError(self.error)

        def reconcile(folder: Folder) -> None:
            self._swap(self._state.model_copy(update={"folders": _replace_by_id(self._state.folders, folder)}))

        return await self._mutate(
            "edit folders", lambda: self._client.update_folder(folder_id, request), reconcile
        )

    async def delete_folder(self, folder_id: str) -> None:
        # Server cascades to subfolders, modules and entries; reload everything.
        await self._mutate(
            "delete folders", lambda: self._client.delete_folder(folder_id), refresh_after=True
        )

    # ==================== Modules ====================

    async def add_module(self, request: CreateModuleRequest) -> Module:
        def reconcile(module: Module) -> None:
            self._swap(self._state.model_copy(update={"modules": [*self._state.modules, module]}))

        return await self._mutate("create modules", lambda: self._client.create_module(request), reconcile)

    async def update_module(self, module_id: str, request: UpdateModuleRequest) -> Module:
        def reconcile(module: Module) -> None:
            self._swap(self._state.model_copy(update={"modules": _replace_by_id(self._state.modules, module)}))

        return await self._mutate(
            "edit modules", lambda: self._client.update_module(module_id, request), reconcile
        )

    async def delete_module(self, module_id: str) -> None:
        await self._mutate(
            "delete modules", lambda: self._client.delete_module(module_id), refresh_after=True
        )

    # ==================== Entries ====================

    async def add_entry(self, request: CreateEntryRequest) -> Entry:
        def reconcile(entry: Entry) -> None:
            self._swap(self._state.model_copy(update={"entries": [entry, *self._state.entries]}))

        return await self._mutate("create entries", lambda: self._client.create_entry(request), reconcile)

    async def update_entry(self, entry_id: str, request: UpdateEntryRequest) -> Entry:
        def reconcile(entry: Entry) -> None:
            self._swap(self._state.model_copy(update={"entries": _replace_by_id(self._state.entries, entry)}))

        return await self._mutate(
            "edit entries", lambda: self._client.update_entry(entry_id, request), reconcile
        )

    async def delete_entry(self, entry_id: str) -> None:
        def reconcile(_: None) -> None:
            remaining = [entry for entry in self._state.entries if entry.id != entry_id]
            self._swap(self._state.model_copy(update={"entries": remaining}))

        await self._mutate("delete entries", lambda: self._client.delete_entry(entry_id), reconcile)

    # ==================== Profile and timer ====================

    async def update_profile(self, request: UpdateProfileRequest) -> Profile:
        def reconcile(profile: Profile) -> None:
            self._profile = profile

        return await self._mutate("update your profile", lambda: self._client.upsert_profile(request), reconcile)

    async def record_timer_session(self, request: CreateTimerSessionRequest) -> TimerSession:
        return await self._mutate("save timer sessions", lambda: self._client.create_timer_session(request))
