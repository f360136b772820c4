"""SQLAlchemy ORM models for timekeeper.

Entity Hierarchy:
    User -> Profile (1:1)
    User -> Folder -> Folder (self-referential) -> Module -> Entry
                                                         -> TimerSession (module optional)

Durations are stored as whole minutes (entries) or seconds (timer sessions);
entry dates are calendar dates without a time part.
"""

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, relationship

from timekeeper.utils.time_utils import utc_now


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserModel(Base):
    """User account."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    display_name = Column(String(255), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utc_now)

    # Relationships
    profile = relationship("ProfileModel", back_populates="user", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (Index("idx_users_email", "email"),)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class ProfileModel(Base):
    """Per-user preferences, at most one row per user."""

    __tablename__ = "profiles"

    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    email = Column(String(255), nullable=True)
    display_name = Column(String(255), nullable=True)
    timezone = Column(String(64), nullable=True)
    default_view = Column(String(32), nullable=True)
    weekly_focus_goal_minutes = Column(Integer, nullable=True)
    default_entry_duration_minutes = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    user = relationship("UserModel", back_populates="profile")

    def __repr__(self) -> str:
        return f"<Profile(user_id={self.user_id})>"


class FolderModel(Base):
    """Folder in a user's hierarchy.

    Deleting a folder removes its subfolders, their modules and all entries.
    """

    __tablename__ = "folders"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    parent_id = Column(String(64), ForeignKey("folders.id", ondelete="CASCADE"), nullable=True)
    name = Column(String(255), nullable=False)
    order_index = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    # Relationships
    children = relationship("FolderModel", cascade="all, delete-orphan")
    modules = relationship("ModuleModel", back_populates="folder", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_folders_user", "user_id"),
        Index("idx_folders_parent", "parent_id"),
    )

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name={self.name})>"


class ModuleModel(Base):
    """Trackable project inside a folder."""

    __tablename__ = "modules"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    folder_id = Column(String(64), ForeignKey("folders.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    target_hours = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    # Relationships
    folder = relationship("FolderModel", back_populates="modules")
    entries = relationship("EntryModel", back_populates="module", cascade="all, delete-orphan")
    # No cascade: sessions outlive their module with module_id set to NULL
    timer_sessions = relationship("TimerSessionModel", back_populates="module")

    __table_args__ = (
        Index("idx_modules_user", "user_id"),
        Index("idx_modules_folder", "folder_id"),
    )

    def __repr__(self) -> str:
        return f"<Module(id={self.id}, name={self.name})>"


class EntryModel(Base):
    """Recorded block of time against a module."""

    __tablename__ = "entries"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    module_id = Column(String(64), ForeignKey("modules.id", ondelete="CASCADE"), nullable=False)
    activity_type = Column(String(64), nullable=False)
    description = Column(Text, nullable=True)
    duration_minutes = Column(Integer, nullable=False)
    entry_date = Column(Date, nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    module = relationship("ModuleModel", back_populates="entries")

    __table_args__ = (
        Index("idx_entries_user_date", "user_id", "entry_date"),
        Index("idx_entries_module", "module_id"),
    )

    def __repr__(self) -> str:
        return f"<Entry(id={self.id}, module_id={self.module_id}, minutes={self.duration_minutes})>"


class TimerSessionModel(Base):
    """Finished stopwatch or countdown run."""

    __tablename__ = "timer_sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    module_id = Column(String(64), ForeignKey("modules.id", ondelete="SET NULL"), nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=False)
    stopped_at = Column(DateTime(timezone=True), nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    module = relationship("ModuleModel", back_populates="timer_sessions")

    __table_args__ = (Index("idx_timer_sessions_user", "user_id"),)

    def __repr__(self) -> str:
        return f"<TimerSession(id={self.id}, seconds={self.duration_seconds})>"
