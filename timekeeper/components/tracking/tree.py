"""Folder tree construction and tree-derived indexes.

- build_folder_tree: parent-pointer list -> nested FolderNode roots with
  rolled-up hours
- flatten_folders: pre-order "A / B / C" paths for pickers and filters
- compute_descendants: folder id -> {self} ∪ all descendant ids
- find_folder_cycles / would_create_cycle: parent-pointer cycle checks

The tree is built top-down from the roots, so folders whose parent chain
never reaches a root (orphans, cycles) are not part of the result.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence

from timekeeper.models.derived import FlattenedFolder, FolderNode, ModuleWithRelations
from timekeeper.models.schemas import Folder

PATH_SEPARATOR = " / "


def group_folders_by_parent(folders: Iterable[Folder]) -> dict[str | None, list[Folder]]:
    """Group folders by parentId, each group sorted by ``order`` (stable)."""
    groups: dict[str | None, list[Folder]] = defaultdict(list)
    for folder in folders:
        groups[folder.parentId].append(folder)
    for siblings in groups.values():
        siblings.sort(key=lambda f: f.order)
    return groups


def build_folder_tree(
    folders: Sequence[Folder],
    modules_by_folder_id: Mapping[str, list[ModuleWithRelations]] | None = None,
) -> list[FolderNode]:
    """Build the folder forest and aggregate hours bottom-up.

    Args:
        folders: Flat folder list
        modules_by_folder_id: Modules per folder, already carrying totalHours

    Returns:
        Root nodes sorted by order; each node's totalHours is the sum of its
        own modules' hours plus its children's totals
    """
    modules_by_folder_id = modules_by_folder_id or {}
    children_by_parent = group_folders_by_parent(folders)

    def build(parent_id: str | None) -> list[FolderNode]:
        nodes = []
        for folder in children_by_parent.get(parent_id, []):
            children = build(folder.id)
            modules = modules_by_folder_id.get(folder.id, [])
            modules_hours = sum(module.totalHours for module in modules)
            children_hours = sum(child.totalHours for child in children)
            nodes.append(
                FolderNode(
                    **folder.model_dump(),
                    children=children,
                    modules=modules,
                    totalHours=modules_hours + children_hours,
                )
            )
        return nodes

    return build(None)


def iter_nodes(roots: Iterable[FolderNode]) -> Iterable[FolderNode]:
    """Yield every node in pre-order."""
    for node in roots:
        yield node
        yield from iter_nodes(node.children)


def index_folder_nodes(roots: Iterable[FolderNode]) -> dict[str, FolderNode]:
    return {node.id: node for node in iter_nodes(roots)}


def flatten_folders(roots: Sequence[FolderNode]) -> list[FlattenedFolder]:
    """Pre-order walk producing one FlattenedFolder per node.

    Example:
        A(A1, A2) -> ["A" @0, "A / A1" @1, "A / A2" @1]
    """
    result: list[FlattenedFolder] = []

    def traverse(nodes: Sequence[FolderNode], parent_path: str, depth: int) -> None:
        for node in nodes:
            path = f"{parent_path}{PATH_SEPARATOR}{node.name}" if parent_path else node.name
            result.append(FlattenedFolder(id=node.id, path=path, depth=depth, parentId=node.parentId))
            traverse(node.children, path, depth + 1)

    traverse(roots, "", 0)
    return result


def compute_descendants(roots: Sequence[FolderNode]) -> dict[str, set[str]]:
    """Post-order closure: each id maps to itself plus every descendant id."""
    descendants: dict[str, set[str]] = {}

    def visit(node: FolderNode) -> set[str]:
        ids = {node.id}
        for child in node.children:
            ids |= visit(child)
        descendants[node.id] = ids
        return ids

    for root in roots:
        visit(root)
    return descendants


def allowed_folder_ids(descendants: Mapping[str, set[str]], folder_id: str | None) -> set[str] | None:
    """Folder ids matched by a "folder + subfolders" filter.

    Returns None when no filter is active. An id missing from the index
    (e.g. an orphan) still matches itself.
    """
    if folder_id is None:
        return None
    return descendants.get(folder_id) or {folder_id}


def find_folder_cycles(folders: Iterable[Folder]) -> list[list[str]]:
    """Return every parentId cycle as a list of folder ids.

    Each cycle is reported once, starting from the member first reached while
    following parent pointers.
    """
    parent_of = {folder.id: folder.parentId for folder in folders}
    state: dict[str, int] = {}  # 1 = on current path, 2 = done
    cycles: list[list[str]] = []

    for start in parent_of:
        path: list[str] = []
        current: str | None = start
        while current is not None and current in parent_of and current not in state:
            state[current] = 1
            path.append(current)
            current = parent_of[current]
        if current is not None and state.get(current) == 1:
            cycles.append(path[path.index(current):])
        for folder_id in path:
            state[folder_id] = 2

    return cycles


def would_create_cycle(folders: Iterable[Folder], folder_id: str, new_parent_id: str | None) -> bool:
    """Check whether re-parenting folder_id under new_parent_id closes a loop.

    Walks up from the new parent; reaching folder_id means the new parent is
    the folder itself or one of its descendants.
    """
    if new_parent_id is None:
        return False
    parent_of = {folder.id: folder.parentId for folder in folders}
    seen: set[str] = set()
    current: str | None = new_parent_id
    while current is not None and current not in seen:
        if current == folder_id:
            return True
        seen.add(current)
        current = parent_of.get(current)
    return False
