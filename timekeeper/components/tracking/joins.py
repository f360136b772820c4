"""Module join view: modules enriched with their folder and entries."""

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence

from timekeeper.errors import DataIntegrityError
from timekeeper.models.derived import ModuleWithRelations
from timekeeper.models.schemas import Entry, Folder, Module


def sort_entries(entries: Iterable[Entry]) -> list[Entry]:
    """Sort entries by timestamp, newest first. Ties keep their input order."""
    return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)


def join_modules(
    modules: Sequence[Module],
    folders: Sequence[Folder],
    entries: Sequence[Entry],
    entries_sorted: Sequence[Entry] | None = None,
) -> list[ModuleWithRelations]:
    """Attach folder, entries and totalHours to every module.

    Args:
        modules: Flat module list (output keeps this order)
        folders: Flat folder list used to resolve ``folderId``
        entries: Flat entry list
        entries_sorted: Pre-sorted entries, to avoid sorting twice

    Returns:
        One ModuleWithRelations per module; each module's entries are a
        subsequence of the globally sorted entry list

    Raises:
        DataIntegrityError: If a module references a folder that is not in ``folders``
    """
    folder_map = {folder.id: folder for folder in folders}
    if entries_sorted is None:
        entries_sorted = sort_entries(entries)

    entries_by_module: dict[str, list[Entry]] = defaultdict(list)
    for entry in entries_sorted:
        entries_by_module[entry.moduleId].append(entry)

    result = []
    for module in modules:
        folder = folder_map.get(module.folderId)
        if folder is None:
            raise DataIntegrityError(f"Folder {module.folderId} not found for module {module.id}")
        module_entries = entries_by_module.get(module.id, [])
        result.append(
            ModuleWithRelations(
                **module.model_dump(),
                folder=folder,
                entries=module_entries,
                totalHours=sum(entry.durationHours for entry in module_entries),
            )
        )
    return result


def group_modules_by_folder(
    modules: Iterable[ModuleWithRelations],
) -> dict[str, list[ModuleWithRelations]]:
    """Group modules by folderId, each group sorted by ``order``."""
    groups: dict[str, list[ModuleWithRelations]] = defaultdict(list)
    for module in modules:
        groups[module.folderId].append(module)
    for group in groups.values():
        group.sort(key=lambda m: m.order)
    return dict(groups)


def first_module_for_folder(
    modules_by_folder_id: Mapping[str, list[ModuleWithRelations]],
    folder_id: str,
) -> ModuleWithRelations | None:
    """Default module preselected by new-entry forms for a folder."""
    modules = modules_by_folder_id.get(folder_id)
    return modules[0] if modules else None
