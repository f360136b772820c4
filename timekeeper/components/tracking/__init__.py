"""Tracking derivation engine.

Pure, in-memory logic over a TimeTrackingState snapshot:
- joins.py: module join view and per-folder module groups
- tree.py: folder tree with rolled-up hours, path flattening, descendant index
- derivation.py: full pipeline plus identity-memoized cache
- analytics.py: dashboard statistics
- timer.py: stopwatch and countdown

Usage:
    from timekeeper.components.tracking import DerivationCache

    cache = DerivationCache()
    derived = cache.get(state)
    for row in derived.flattened_folders:
        print(row.depth, row.path)
"""

from timekeeper.components.tracking.analytics import (
    DailyHours,
    DashboardStats,
    DistributionItem,
    ModuleProgress,
    average_per_day,
    build_dashboard,
    distribution,
    filter_entries,
    filter_modules,
    heatmap_intensity,
    hours_by_day,
    module_progress,
    month_buckets,
    monthly_heatmap,
    monthly_options,
)
from timekeeper.components.tracking.derivation import DerivationCache, DerivedState, derive_state
from timekeeper.components.tracking.joins import (
    first_module_for_folder,
    group_modules_by_folder,
    join_modules,
    sort_entries,
)
from timekeeper.components.tracking.timer import CountdownTimer, Stopwatch, decimal_hours, format_elapsed
from timekeeper.components.tracking.tree import (
    allowed_folder_ids,
    build_folder_tree,
    compute_descendants,
    find_folder_cycles,
    flatten_folders,
    index_folder_nodes,
    would_create_cycle,
)

__all__ = [
    # Derivation
    "DerivationCache",
    "DerivedState",
    "derive_state",
    # Join view
    "join_modules",
    "sort_entries",
    "group_modules_by_folder",
    "first_module_for_folder",
    # Tree
    "build_folder_tree",
    "flatten_folders",
    "compute_descendants",
    "allowed_folder_ids",
    "index_folder_nodes",
    "find_folder_cycles",
    "would_create_cycle",
    # Analytics
    "DailyHours",
    "DashboardStats",
    "DistributionItem",
    "ModuleProgress",
    "build_dashboard",
    "distribution",
    "filter_entries",
    "filter_modules",
    "hours_by_day",
    "average_per_day",
    "heatmap_intensity",
    "month_buckets",
    "monthly_heatmap",
    "monthly_options",
    "module_progress",
    # Timer
    "Stopwatch",
    "CountdownTimer",
    "format_elapsed",
    "decimal_hours",
]
