"""Dashboard statistics computed client-side from the derived views.

Everything here is a pure function of a DerivedState (plus "today"); the
server never aggregates.
"""

import calendar
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from typing import Literal

from pydantic import BaseModel, Field

from timekeeper.components.tracking.derivation import DerivedState
from timekeeper.components.tracking.tree import allowed_folder_ids, index_folder_nodes
from timekeeper.models.derived import ModuleWithRelations
from timekeeper.models.schemas import Entry
from timekeeper.settings import settings
from timekeeper.utils import parse_entry_date

DISTRIBUTION_COLORS = ["#4c6ef5", "#82c91e", "#f59f00", "#d6336c", "#20c997", "#7950f2"]

# Modules at or above this many hours count as "active" on the dashboard
ACTIVE_MODULE_HOURS = 5.0


class DailyHours(BaseModel):
    date: str  # YYYY-MM-DD
    hours: float


class DistributionItem(BaseModel):
    id: str
    type: Literal["folder", "module"]
    name: str
    hours: float
    color: str
    parentId: str | None = None


class ModuleProgress(BaseModel):
    moduleId: str
    name: str
    folderId: str
    totalHours: float
    target: float
    progress: float  # percent, capped at 100


class DashboardStats(BaseModel):
    folderId: str | None = None
    distribution: list[DistributionItem] = Field(default_factory=list)
    distributionTotal: float = 0.0
    hoursByDay: list[DailyHours] = Field(default_factory=list)
    averagePerDay: float = 0.0
    progress: list[ModuleProgress] = Field(default_factory=list)
    modulesWithTarget: int = 0
    activeModules: int = 0
    totalHours: float = 0.0


# ==================== Filtering ====================


def filter_modules(derived: DerivedState, folder_id: str | None = None) -> list[ModuleWithRelations]:
    """Modules in folder_id or any of its subfolders (all modules if None)."""
    allowed = allowed_folder_ids(derived.folder_descendants, folder_id)
    if allowed is None:
        return list(derived.modules_with_relations)
    return [module for module in derived.modules_with_relations if module.folderId in allowed]


def filter_entries(
    derived: DerivedState,
    folder_id: str | None = None,
    module_id: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[Entry]:
    """Entries (newest first) matching folder subtree, module and inclusive date range.

    Entries whose module is not in the snapshot are dropped.
    """
    allowed = allowed_folder_ids(derived.folder_descendants, folder_id)
    result = []
    for entry in derived.entries_sorted:
        module = derived.get_module_by_id(entry.moduleId)
        if module is None:
            continue
        if allowed is not None and module.folderId not in allowed:
            continue
        if module_id is not None and entry.moduleId != module_id:
            continue
        entry_date = parse_entry_date(entry.timestamp)
        if start is not None and entry_date < start:
            continue
        if end is not None and entry_date > end:
            continue
        result.append(entry)
    return result


def _module_entries(modules: Iterable[ModuleWithRelations]) -> Iterable[Entry]:
    for module in modules:
        yield from module.entries


# ==================== Heatmaps ====================


def hours_by_day(
    modules: Iterable[ModuleWithRelations],
    today: date,
    days: int | None = None,
) -> list[DailyHours]:
    """Hours per day for the ``days`` days ending today, oldest first."""
    days = settings.heatmap_days if days is None else days
    totals: dict[date, float] = defaultdict(float)
    for entry in _module_entries(modules):
        totals[parse_entry_date(entry.timestamp)] += entry.durationHours

    result = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        result.append(DailyHours(date=day.isoformat(), hours=totals.get(day, 0.0)))
    return result


def average_per_day(daily: Sequence[DailyHours]) -> float:
    return sum(d.hours for d in daily) / max(1, len(daily))


def heatmap_intensity(hours: float, full_hours: float | None = None) -> float:
    """Cell shade in [0, 1]; ``full_hours`` or more renders fully saturated."""
    full_hours = settings.heatmap_full_hours if full_hours is None else full_hours
    return min(1.0, hours / full_hours)


def month_buckets(modules: Iterable[ModuleWithRelations]) -> dict[str, dict[str, float]]:
    """{"YYYY-MM": {"YYYY-MM-DD": hours}}"""
    buckets: dict[str, dict[str, float]] = defaultdict(lambda: defaultdict(float))
    for entry in _module_entries(modules):
        entry_date = parse_entry_date(entry.timestamp)
        buckets[entry_date.strftime("%Y-%m")][entry_date.isoformat()] += entry.durationHours
    return {month: dict(days) for month, days in buckets.items()}


def monthly_options(buckets: dict[str, dict[str, float]], today: date) -> list[str]:
    """Selectable months: every month with data plus the current one, newest first."""
    months = set(buckets) | {today.strftime("%Y-%m")}
    return sorted(months, reverse=True)


def monthly_heatmap(buckets: dict[str, dict[str, float]], month: str) -> list[DailyHours]:
    """One cell per calendar day of ``month`` ("YYYY-MM"); [] if month is malformed."""
    try:
        year, month_number = (int(part) for part in month.split("-"))
        _, days_in_month = calendar.monthrange(year, month_number)
    except ValueError:
        return []

    month_data = buckets.get(month, {})
    result = []
    for day in range(1, days_in_month + 1):
        key = date(year, month_number, day).isoformat()
        result.append(DailyHours(date=key, hours=month_data.get(key, 0.0)))
    return result


# ==================== Distribution / Progress ====================


def distribution(derived: DerivedState, folder_id: str | None = None) -> list[DistributionItem]:
    """Hour split for a ring chart.

    Without a folder (or an unknown one): one slice per root folder.
    Otherwise: the folder's child folders, then its own modules.
    """
    node = index_folder_nodes(derived.folder_tree).get(folder_id) if folder_id else None

    def color(index: int) -> str:
        return DISTRIBUTION_COLORS[index % len(DISTRIBUTION_COLORS)]

    if node is None:
        return [
            DistributionItem(
                id=root.id,
                type="folder",
                name=root.name,
                hours=root.totalHours,
                color=color(index),
                parentId=root.parentId,
            )
            for index, root in enumerate(derived.folder_tree)
        ]

    items = []
    for child in sorted(node.children, key=lambda c: c.order):
        items.append(
            DistributionItem(
                id=child.id,
                type="folder",
                name=child.name,
                hours=child.totalHours,
                color=color(len(items)),
                parentId=child.parentId,
            )
        )
    for module in sorted(node.modules, key=lambda m: m.order):
        items.append(
            DistributionItem(
                id=module.id,
                type="module",
                name=module.name,
                hours=module.totalHours,
                color=color(len(items)),
                parentId=node.id,
            )
        )
    return items


def module_progress(modules: Iterable[ModuleWithRelations]) -> list[ModuleProgress]:
    """Progress toward targetHours; modules without a target report 0%."""
    result = []
    for module in modules:
        target = module.targetHours or 0.0
        progress = min(100.0, module.totalHours / target * 100) if target > 0 else 0.0
        result.append(
            ModuleProgress(
                moduleId=module.id,
                name=module.name,
                folderId=module.folderId,
                totalHours=module.totalHours,
                target=target,
                progress=progress,
            )
        )
    return result


def build_dashboard(
    derived: DerivedState,
    folder_id: str | None = None,
    today: date | None = None,
    days: int | None = None,
) -> DashboardStats:
    """Assemble every dashboard figure for the selected folder scope."""
    today = today or date.today()
    modules = filter_modules(derived, folder_id)
    items = distribution(derived, folder_id)
    daily = hours_by_day(modules, today, days)
    progress = module_progress(modules)

    return DashboardStats(
        folderId=folder_id,
        distribution=items,
        distributionTotal=sum(item.hours for item in items),
        hoursByDay=daily,
        averagePerDay=average_per_day(daily),
        progress=progress,
        modulesWithTarget=sum(1 for p in progress if p.target > 0),
        activeModules=sum(1 for p in progress if p.totalHours >= ACTIVE_MODULE_HOURS),
        totalHours=sum(module.totalHours for module in modules),
    )
