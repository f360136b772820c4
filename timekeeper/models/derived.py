"""Read-only views derived from a snapshot.

These hold no identity of their own; they are rebuilt whenever the snapshot
changes and must not be mutated by consumers.
"""

from pydantic import BaseModel, Field

from timekeeper.models.schemas import Entry, Folder, Module


class ModuleWithRelations(Module):
    """Module joined with its folder and its entries (newest first)."""

    folder: Folder
    entries: list[Entry] = Field(default_factory=list)
    totalHours: float = 0.0


class FolderNode(Folder):
    """Folder with nested children and hours rolled up from its subtree."""

    children: list["FolderNode"] = Field(default_factory=list)
    modules: list[ModuleWithRelations] = Field(default_factory=list)
    totalHours: float = 0.0


class FlattenedFolder(BaseModel):
    """One row of a folder picker: "Parent / Child" path and nesting depth."""

    id: str
    path: str
    depth: int
    parentId: str | None = None


FolderNode.model_rebuild()
