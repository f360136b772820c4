"""Tests for folder tree construction, flattening and descendant index."""

from timekeeper.components.tracking.tree import (
    allowed_folder_ids,
    build_folder_tree,
    compute_descendants,
    find_folder_cycles,
    flatten_folders,
    index_folder_nodes,
    would_create_cycle,
)
from timekeeper.models.schemas import Folder


class TestBuildFolderTree:
    """Test build_folder_tree."""

    def test_children_sorted_by_order(self, sample_folders):
        """Siblings come out sorted by order regardless of input order."""
        roots = build_folder_tree(sample_folders)

        assert [r.id for r in roots] == ["A"]
        assert [c.id for c in roots[0].children] == ["A1", "A2"]

    def test_every_reachable_folder_appears_once(self, sample_folders):
        """Walking the tree visits each folder exactly once."""
        nodes = index_folder_nodes(build_folder_tree(sample_folders))
        assert set(nodes) == {"A", "A1", "A2"}

    def test_orphan_folder_excluded(self):
        """A folder whose parent does not exist is not part of the tree."""
        folders = [
            Folder(id="root", name="Root"),
            Folder(id="orphan", name="Orphan", parentId="missing"),
        ]
        nodes = index_folder_nodes(build_folder_tree(folders))
        assert set(nodes) == {"root"}

    def test_cycle_terminates_and_is_excluded(self):
        """Folders in a parent cycle are unreachable from a root."""
        folders = [
            Folder(id="root", name="Root"),
            Folder(id="x", name="X", parentId="y"),
            Folder(id="y", name="Y", parentId="x"),
        ]
        nodes = index_folder_nodes(build_folder_tree(folders))
        assert set(nodes) == {"root"}

    def test_stable_order_for_equal_order_values(self):
        """Equal order values keep input order."""
        folders = [
            Folder(id="b", name="B", order=0),
            Folder(id="a", name="A", order=0),
        ]
        assert [r.id for r in build_folder_tree(folders)] == ["b", "a"]

    def test_empty_folder_totals_zero(self):
        roots = build_folder_tree([Folder(id="empty", name="Empty")])
        assert roots[0].totalHours == 0.0


class TestFlattenFolders:
    """Test pre-order path flattening."""

    def test_paths_and_depths(self, sample_folders):
        """A(A1, A2) flattens to A, A / A1, A / A2."""
        flat = flatten_folders(build_folder_tree(sample_folders))

        assert [f.path for f in flat] == ["A", "A / A1", "A / A2"]
        assert [f.depth for f in flat] == [0, 1, 1]
        assert [f.parentId for f in flat] == [None, "A", "A"]

    def test_depth_equals_ancestor_count(self):
        folders = [
            Folder(id="a", name="a"),
            Folder(id="b", name="b", parentId="a"),
            Folder(id="c", name="c", parentId="b"),
        ]
        flat = flatten_folders(build_folder_tree(folders))
        assert flat[-1].path == "a / b / c"
        assert flat[-1].depth == 2


class TestDescendants:
    """Test descendant index."""

    def test_descendant_sets(self, sample_folders):
        descendants = compute_descendants(build_folder_tree(sample_folders))

        assert descendants["A"] == {"A", "A1", "A2"}
        assert descendants["A1"] == {"A1"}
        assert descendants["A2"] == {"A2"}

    def test_allowed_folder_ids(self, sample_folders):
        """No filter returns None; unknown ids fall back to themselves."""
        descendants = compute_descendants(build_folder_tree(sample_folders))

        assert allowed_folder_ids(descendants, None) is None
        assert allowed_folder_ids(descendants, "A") == {"A", "A1", "A2"}
        assert allowed_folder_ids(descendants, "ghost") == {"ghost"}


class TestCycleDetection:
    """Test cycle helpers."""

    def test_find_folder_cycles(self):
        folders = [
            Folder(id="root", name="Root"),
            Folder(id="x", name="X", parentId="y"),
            Folder(id="y", name="Y", parentId="x"),
            Folder(id="self", name="Self", parentId="self"),
        ]
        cycles = find_folder_cycles(folders)

        assert sorted(sorted(c) for c in cycles) == [["self"], ["x", "y"]]

    def test_no_cycles_in_forest(self, sample_folders):
        assert find_folder_cycles(sample_folders) == []

    def test_would_create_cycle(self, sample_folders):
        """Moving a folder under itself or a descendant is a cycle."""
        assert would_create_cycle(sample_folders, "A", "A1") is True
        assert would_create_cycle(sample_folders, "A", "A") is True
        assert would_create_cycle(sample_folders, "A1", "A2") is False
        assert would_create_cycle(sample_folders, "A1", None) is False
