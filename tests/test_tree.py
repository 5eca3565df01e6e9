"""Tests for directory tree rendering."""

import pytest

from context_hopper.tree import EmptyPathListError
from context_hopper.tree import build_tree
from context_hopper.tree import common_ancestor


class TestCommonAncestor:
    def test_segment_wise_prefix(self):
        assert str(common_ancestor(["/a/bc/x", "/a/bcd/y"])) == "/a"

    def test_single_path_uses_parent(self):
        assert str(common_ancestor(["/a/b/c.ts"])) == "/a/b"

    def test_windows_paths(self):
        paths = [
            "C:\\Users\\dev\\Project\\src\\components\\Button.ts",
            "C:\\Users\\dev\\Project\\src\\utils\\helper.ts",
        ]
        assert str(common_ancestor(paths)) == "C:\\Users\\dev\\Project\\src"

    def test_empty_list_rejected(self):
        with pytest.raises(EmptyPathListError):
            common_ancestor([])


class TestBuildTree:
    def test_sorted_siblings_and_root(self):
        expected = "Root: /a\n├── b\n│   └── x.ts\n└── c\n    └── y.ts\n"
        assert build_tree(["/a/b/x.ts", "/a/c/y.ts"]) == expected
        assert build_tree(["/a/c/y.ts", "/a/b/x.ts"]) == expected

    def test_deterministic_for_shuffled_input(self):
        paths = ["/p/src/z.ts", "/p/src/a/b.ts", "/p/docs/readme.md", "/p/src/a/a.ts"]
        outputs = {build_tree(list(reversed(paths))), build_tree(paths), build_tree(sorted(paths))}
        assert len(outputs) == 1

    def test_nested_rendering(self):
        paths = ["/p/src/a/b.ts", "/p/src/z.ts", "/p/docs/readme.md"]
        assert build_tree(paths) == (
            "Root: /p\n"
            "├── docs\n"
            "│   └── readme.md\n"
            "└── src\n"
            "    ├── a\n"
            "    │   └── b.ts\n"
            "    └── z.ts\n"
        )

    def test_single_path(self):
        assert build_tree(["/a/b/c.ts"]) == "Root: /a/b\n└── c.ts\n"

    def test_explicit_root(self):
        paths = ["/repo/src/x.ts", "/repo/src/y.ts"]
        assert build_tree(paths, "/repo") == "Root: /repo\n└── src\n    ├── x.ts\n    └── y.ts\n"

    def test_path_outside_explicit_root_keeps_segments(self):
        assert build_tree(["/other/x.ts"], "/repo") == "Root: /repo\n└── other\n    └── x.ts\n"

    def test_windows_explicit_root(self):
        paths = [
            "C:\\Users\\dev\\Project\\src\\components\\Button.ts",
            "C:\\Users\\dev\\Project\\src\\components\\Header.ts",
            "C:\\Users\\dev\\Project\\src\\utils\\helper.ts",
        ]
        assert build_tree(paths, "C:\\Users\\dev\\Project") == (
            "Root: C:\\Users\\dev\\Project\n"
            "└── src\n"
            "    ├── components\n"
            "    │   ├── Button.ts\n"
            "    │   └── Header.ts\n"
            "    └── utils\n"
            "        └── helper.ts\n"
        )

    def test_duplicate_paths_render_once(self):
        assert build_tree(["/a/x.ts", "/a/x.ts", "/a/y.ts"]) == "Root: /a\n├── x.ts\n└── y.ts\n"

    def test_empty_list_rejected(self):
        with pytest.raises(EmptyPathListError):
            build_tree([])
