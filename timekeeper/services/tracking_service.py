"""User-scoped persistence service behind the /api/zeit routes.

The service stores and returns rows; it never aggregates. Durations arrive as
float hours and are stored as whole minutes, converted only here.
"""

from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from timekeeper.components.tracking import would_create_cycle
from timekeeper.db.models import EntryModel, FolderModel, ModuleModel, ProfileModel, TimerSessionModel
from timekeeper.errors import FolderCycleError, NotFoundError, ValidationError
from timekeeper.models.schemas import (
    CreateEntryRequest,
    CreateFolderRequest,
    CreateModuleRequest,
    CreateTimerSessionRequest,
    Entry,
    Folder,
    Module,
    Profile,
    StatePayload,
    TimerSession,
    UpdateEntryRequest,
    UpdateFolderRequest,
    UpdateModuleRequest,
    UpdateProfileRequest,
)
from timekeeper.repositories import (
    entry_repository,
    folder_repository,
    module_repository,
    profile_repository,
    timer_session_repository,
)
from timekeeper.settings import settings
from timekeeper.utils import generate_id, get_logger, hours_to_minutes, minutes_to_hours, to_iso

logger = get_logger(__name__)


# ==================== Row mapping ====================


def folder_to_schema(row: FolderModel) -> Folder:
    return Folder(id=row.id, name=row.name, parentId=row.parent_id, order=row.order_index)


def module_to_schema(row: ModuleModel) -> Module:
    return Module(
        id=row.id,
        name=row.name,
        folderId=row.folder_id,
        targetHours=row.target_hours,
        notes=row.notes,
        order=row.order_index,
    )


def entry_to_schema(row: EntryModel) -> Entry:
    return Entry(
        id=row.id,
        moduleId=row.module_id,
        activityType=row.activity_type,
        description=row.description,
        durationHours=minutes_to_hours(row.duration_minutes),
        timestamp=row.entry_date.isoformat(),
        createdAt=to_iso(row.created_at),
    )


def profile_to_schema(row: ProfileModel) -> Profile:
    """Map a profile row, filling unset preferences with the configured defaults."""
    return Profile(
        userId=row.user_id,
        email=row.email,
        displayName=row.display_name,
        timezone=row.timezone or settings.default_timezone,
        weeklyFocusGoalMinutes=(
            row.weekly_focus_goal_minutes
            if row.weekly_focus_goal_minutes is not None
            else settings.default_weekly_focus_goal_minutes
        ),
        defaultEntryDurationMinutes=(
            row.default_entry_duration_minutes
            if row.default_entry_duration_minutes is not None
            else settings.default_entry_duration_minutes
        ),
        defaultView=row.default_view or settings.default_view,
        updatedAt=to_iso(row.updated_at),
    )


def timer_session_to_schema(row: TimerSessionModel) -> TimerSession:
    return TimerSession(
        id=row.id,
        moduleId=row.module_id,
        startedAt=to_iso(row.started_at),
        stoppedAt=to_iso(row.stopped_at) if row.stopped_at else None,
        durationSeconds=row.duration_seconds,
        note=row.note,
        createdAt=to_iso(row.created_at),
    )


def _parse_datetime(value: str, field: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"{field} must be an ISO datetime: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _entry_minutes(hours: float) -> int:
    minutes = hours_to_minutes(hours)
    if minutes < 1:
        raise ValidationError("Duration must be at least one minute.")
    return minutes


def _require_value(changes: dict[str, Any], key: str, label: str) -> Any:
    value = changes[key]
    if value is None:
        raise ValidationError(f"{label} cannot be empty.")
    return value


class TrackingService:
    """Row storage for one authenticated user.

    Every lookup is filtered by ``user_id``; rows owned by other users behave
    exactly like missing rows (NotFoundError).
    """

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    # ==================== Lookups ====================

    def _get_folder(self, folder_id: str) -> FolderModel:
        folder = folder_repository.get_owned(self.db, self.user_id, folder_id)
        if folder is None:
            raise NotFoundError(f"Folder not found: {folder_id}")
        return folder

    def _get_module(self, module_id: str) -> ModuleModel:
        module = module_repository.get_owned(self.db, self.user_id, module_id)
        if module is None:
            raise NotFoundError(f"Module not found: {module_id}")
        return module

    def _get_entry(self, entry_id: str) -> EntryModel:
        entry = entry_repository.get_owned(self.db, self.user_id, entry_id)
        if entry is None:
            raise NotFoundError(f"Entry not found: {entry_id}")
        return entry

    # ==================== State ====================

    def fetch_state(self) -> StatePayload:
        """Return the user's full dataset in one payload."""
        profile_row = profile_repository.get_for_user(self.db, self.user_id)
        return StatePayload(
            profile=profile_to_schema(profile_row) if profile_row else None,
            folders=[folder_to_schema(row) for row in folder_repository.list_for_user(self.db, self.user_id)],
            modules=[module_to_schema(row) for row in module_repository.list_for_user(self.db, self.user_id)],
            entries=[entry_to_schema(row) for row in entry_repository.list_for_user(self.db, self.user_id)],
        )

    def upsert_profile(self, request: UpdateProfileRequest) -> Profile:
        changes = request.model_dump(exclude_unset=True)
        columns = {
            "email": changes.get("email"),
            "display_name": changes.get("displayName"),
            "timezone": changes.get("timezone"),
            "weekly_focus_goal_minutes": changes.get("weeklyFocusGoalMinutes"),
            "default_entry_duration_minutes": changes.get("defaultEntryDurationMinutes"),
            "default_view": changes.get("defaultView"),
        }
        row = profile_repository.upsert(self.db, self.user_id, columns)
        logger.info(f"Profile saved for user {self.user_id}")
        return profile_to_schema(row)

    # ==================== Folders ====================

    def create_folder(self, request: CreateFolderRequest) -> Folder:
        """Create a folder at the end of its sibling list."""
        if request.parentId is not None:
            self._get_folder(request.parentId)

        order_index = folder_repository.count_siblings(self.db, self.user_id, request.parentId)
        row = folder_repository.create(
            self.db,
            {
                "id": generate_id("folder"),
                "user_id": self.user_id,
                "parent_id": request.parentId,
                "name": request.name,
                "order_index": order_index,
            },
        )
        logger.info(f"Folder created: {row.id} (parent={row.parent_id}, order={order_index})")
        return folder_to_schema(row)

    def update_folder(self, folder_id: str, request: UpdateFolderRequest) -> Folder:
        """Apply a partial folder update.

        Raises:
            NotFoundError: Folder or new parent missing
            FolderCycleError: New parent is the folder itself or one of its descendants
        """
        row = self._get_folder(folder_id)
        changes = request.model_dump(exclude_unset=True)
        update: dict[str, Any] = {}

        if "name" in changes:
            update["name"] = _require_value(changes, "name", "Folder name")
        if "parentId" in changes:
            parent_id = changes["parentId"]
            if parent_id is not None:
                self._get_folder(parent_id)
                folders = [folder_to_schema(f) for f in folder_repository.list_for_user(self.db, self.user_id)]
                if would_create_cycle(folders, folder_id, parent_id):
                    logger.warning(f"Rejected folder move {folder_id} -> {parent_id}: cycle")
                    raise FolderCycleError("A folder cannot be moved into itself or one of its subfolders.")
            update["parent_id"] = parent_id
        if changes.get("order") is not None:
            update["order_index"] = changes["order"]

        row = folder_repository.update(self.db, row, update)
        logger.info(f"Folder updated: {folder_id} ({', '.join(update) or 'no changes'})")
        return folder_to_schema(row)

    def delete_folder(self, folder_id: str) -> None:
        """Delete a folder with its subfolders, their modules and entries."""
        row = self._get_folder(folder_id)
        folder_repository.delete_obj(self.db, row)
        logger.info(f"Folder deleted: {folder_id}")

    # ==================== Modules ====================

    def create_module(self, request: CreateModuleRequest) -> Module:
        self._get_folder(request.folderId)
        order_index = module_repository.count_in_folder(self.db, self.user_id, request.folderId)
        row = module_repository.create(
            self.db,
            {
                "id": generate_id("module"),
                "user_id": self.user_id,
                "folder_id": request.folderId,
                "name": request.name,
                "target_hours": request.targetHours,
                "notes": request.notes,
                "order_index": order_index,
            },
        )
        logger.info(f"Module created: {row.id} (folder={row.folder_id}, order={order_index})")
        return module_to_schema(row)

    def update_module(self, module_id: str, request: UpdateModuleRequest) -> Module:
        row = self._get_module(module_id)
        changes = request.model_dump(exclude_unset=True)
        update: dict[str, Any] = {}

        if "name" in changes:
            update["name"] = _require_value(changes, "name", "Module name")
        if "folderId" in changes:
            folder_id = _require_value(changes, "folderId", "Folder")
            self._get_folder(folder_id)
            update["folder_id"] = folder_id
        # Explicit null clears target and notes
        if "targetHours" in changes:
            update["target_hours"] = changes["targetHours"]
        if "notes" in changes:
            update["notes"] = changes["notes"]
        if changes.get("order") is not None:
            update["order_index"] = changes["order"]

        row = module_repository.update(self.db, row, update)
        logger.info(f"Module updated: {module_id} ({', '.join(update) or 'no changes'})")
        return module_to_schema(row)

    def delete_module(self, module_id: str) -> None:
        row = self._get_module(module_id)
        module_repository.delete_obj(self.db, row)
        logger.info(f"Module deleted: {module_id}")

    # ==================== Entries ====================

    def create_entry(self, request: CreateEntryRequest) -> Entry:
        self._get_module(request.moduleId)
        row = entry_repository.create(
            self.db,
            {
                "id": generate_id("entry"),
                "user_id": self.user_id,
                "module_id": request.moduleId,
                "activity_type": request.activityType,
                "description": request.description,
                "duration_minutes": _entry_minutes(request.durationHours),
                "entry_date": date.fromisoformat(request.timestamp),
                "started_at": None,
            },
        )
        logger.info(f"Entry created: {row.id} (module={row.module_id}, minutes={row.duration_minutes})")
        return entry_to_schema(row)

    def update_entry(self, entry_id: str, request: UpdateEntryRequest) -> Entry:
        row = self._get_entry(entry_id)
        changes = request.model_dump(exclude_unset=True)
        update: dict[str, Any] = {}

        if "moduleId" in changes:
            module_id = _require_value(changes, "moduleId", "Module")
            self._get_module(module_id)
            update["module_id"] = module_id
        if "activityType" in changes:
            update["activity_type"] = _require_value(changes, "activityType", "Activity")
        if "description" in changes:
            update["description"] = changes["description"]
        if "durationHours" in changes:
            update["duration_minutes"] = _entry_minutes(_require_value(changes, "durationHours", "Duration"))
        if "timestamp" in changes:
            update["entry_date"] = date.fromisoformat(_require_value(changes, "timestamp", "Date"))

        row = entry_repository.update(self.db, row, update)
        logger.info(f"Entry updated: {entry_id} ({', '.join(update) or 'no changes'})")
        return entry_to_schema(row)

    def delete_entry(self, entry_id: str) -> None:
        row = self._get_entry(entry_id)
        entry_repository.delete_obj(self.db, row)
        logger.info(f"Entry deleted: {entry_id}")

    # ==================== Timer sessions ====================

    def create_timer_session(self, request: CreateTimerSessionRequest) -> TimerSession:
        """Persist a finished timer run.

        When ``durationSeconds`` is omitted but ``stoppedAt`` is given, the
        duration is taken from the two timestamps.
        """
        if request.moduleId is not None:
            self._get_module(request.moduleId)

        started_at = _parse_datetime(request.startedAt, "startedAt")
        stopped_at = _parse_datetime(request.stoppedAt, "stoppedAt") if request.stoppedAt else None
        if stopped_at is not None and stopped_at < started_at:
            raise ValidationError("stoppedAt must not be earlier than startedAt.")

        duration_seconds = request.durationSeconds
        if duration_seconds is None and stopped_at is not None:
            duration_seconds = int((stopped_at - started_at).total_seconds())

        row = timer_session_repository.create(
            self.db,
            {
                "id": generate_id("timer"),
                "user_id": self.user_id,
                "module_id": request.moduleId,
                "started_at": started_at,
                "stopped_at": stopped_at,
                "duration_seconds": duration_seconds,
                "note": request.note,
            },
        )
        logger.info(f"Timer session recorded: {row.id} ({duration_seconds}s)")
        return timer_session_to_schema(row)
