from .auth_schemas import AuthenticatedUser, Token, UserLogin, UserRegister, UserResponse
from .derived import FlattenedFolder, FolderNode, ModuleWithRelations
from .schemas import (
    CreateEntryRequest,
    CreateFolderRequest,
    CreateModuleRequest,
    CreateTimerSessionRequest,
    DataResponse,
    Entry,
    ErrorResponse,
    Folder,
    Module,
    Profile,
    StatePayload,
    SuccessResponse,
    TimerSession,
    TimeTrackingState,
    UpdateEntryRequest,
    UpdateFolderRequest,
    UpdateModuleRequest,
    UpdateProfileRequest,
)

__all__ = [
    "Folder",
    "Module",
    "Entry",
    "Profile",
    "TimerSession",
    "TimeTrackingState",
    "StatePayload",
    "DataResponse",
    "SuccessResponse",
    "ErrorResponse",
    "CreateFolderRequest",
    "UpdateFolderRequest",
    "CreateModuleRequest",
    "UpdateModuleRequest",
    "CreateEntryRequest",
    "UpdateEntryRequest",
    "UpdateProfileRequest",
    "CreateTimerSessionRequest",
    "FolderNode",
    "ModuleWithRelations",
    "FlattenedFolder",
    "AuthenticatedUser",
    "Token",
    "UserLogin",
    "UserRegister",
    "UserResponse",
]
