"""API v1 Router Aggregator.

Aggregates all v1 API endpoints into a single router.
"""

from fastapi import APIRouter

from timekeeper.api.v1.endpoints import auth, entries, folders, health, modules, profile, state, timer_sessions

api_router = APIRouter()

# Mount endpoint routers
api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(state.router, prefix="/zeit/state", tags=["State"])
api_router.include_router(folders.router, prefix="/zeit/folders", tags=["Folders"])
api_router.include_router(modules.router, prefix="/zeit/modules", tags=["Modules"])
api_router.include_router(entries.router, prefix="/zeit/entries", tags=["Entries"])
api_router.include_router(profile.router, prefix="/zeit/profile", tags=["Profile"])
api_router.include_router(timer_sessions.router, prefix="/zeit/timer-sessions", tags=["Timer"])
