from __future__ import annotations

from pathlib import Path

from flowgraph.analysis.location import (
    SourceTree,
    read_source,
    resolve_location,
    text_window,
)


def test_resolve_location_strips_numeric_line_suffix(tmp_path: Path) -> None:
    location = resolve_location("src/types.ts:42", project_root=tmp_path, root="")
    assert location.path == tmp_path / "src" / "types.ts"
    assert location.line == 42


def test_resolve_location_without_line(tmp_path: Path) -> None:
    location = resolve_location("schema.sql", project_root=tmp_path, root="db/")
    assert location.path == tmp_path / "db" / "schema.sql"
    assert location.line is None


def test_resolve_location_keeps_non_numeric_colon_segments(tmp_path: Path) -> None:
    location = resolve_location("routes/tasks:id.ts", project_root=tmp_path)
    assert location.path == tmp_path / "routes" / "tasks:id.ts"
    assert location.line is None

    location = resolve_location("weird:name.ts:7", project_root=tmp_path)
    assert location.path == tmp_path / "weird:name.ts"
    assert location.line == 7


def test_read_source_returns_none_for_unreadable_paths(tmp_path: Path) -> None:
    assert read_source(tmp_path / "missing.ts") is None
    assert read_source(tmp_path) is None
    (tmp_path / "ok.ts").write_text("export const x = 1;\n", encoding="utf-8")
    assert read_source(tmp_path / "ok.ts") == "export const x = 1;\n"


def test_text_window_bounds() -> None:
    source = "\n".join(f"line{index}" for index in range(1, 41))
    window = text_window(source, 20, 5)
    assert window.splitlines() == [f"line{index}" for index in range(15, 25)]
    assert text_window(source, 1, 5).splitlines()[0] == "line1"
    assert text_window(source, 40, 5).splitlines()[-1] == "line40"


def test_source_tree_reads_under_declared_root(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.py").write_text("def a():\n    pass\n", encoding="utf-8")
    tree = SourceTree(project_root=tmp_path, root="src/")
    location, source = tree.read("a.py:1")
    assert location.line == 1
    assert source is not None and "def a" in source
    assert tree.is_readable("a.py")
    assert not tree.is_readable("b.py")
