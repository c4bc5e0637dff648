"""Tests for converting graphs into renderer nodes and edges."""

from import_map.analysis.graph_builder import GraphBuilder
from import_map.analysis.view import build_view, external_id, view_to_dict
from import_map.models import ImportKind, Relation


def _p(root, rel):
    return str((root / rel).resolve())


def _assert_no_dangling_edges(view):
    ids = set(view.node_ids())
    for edge in view.edges:
        assert edge.from_id in ids
        assert edge.to_id in ids


class TestBuildView:
    def test_no_dangling_edges_project(self, sample_project):
        graph = GraphBuilder().build_whole_project(sample_project)
        _assert_no_dangling_edges(build_view(graph, project_wide=True))

    def test_no_dangling_edges_focused(self, sample_project):
        graph = GraphBuilder().build_focused(sample_project / "src" / "E.ts", sample_project)
        _assert_no_dangling_edges(build_view(graph))

    def test_edge_points_from_dependency_to_dependent(self, sample_project):
        graph = GraphBuilder().build_whole_project(sample_project)
        view = build_view(graph, project_wide=True)
        edges = {(e.from_id, e.to_id) for e in view.edges}
        assert (_p(sample_project, "src/A.ts"), _p(sample_project, "src/E.ts")) in edges
        assert (_p(sample_project, "src/E.ts"), _p(sample_project, "src/C.ts")) in edges

    def test_project_wide_shows_all_externals(self, sample_project):
        graph = GraphBuilder().build_whole_project(sample_project)
        view = build_view(graph, project_wide=True)
        ids = set(view.node_ids())
        assert external_id("react") in ids
        assert external_id("lodash") in ids

    def test_focused_shows_only_entry_externals(self, sample_project):
        graph = GraphBuilder().build_focused(sample_project / "src" / "E.ts", sample_project)
        view = build_view(graph)
        ids = set(view.node_ids())
        assert external_id("react") in ids
        assert external_id("lodash") not in ids

    def test_relations(self, sample_project):
        graph = GraphBuilder().build_focused(sample_project / "src" / "E.ts", sample_project)
        view = build_view(graph)
        by_id = {n.id: n for n in view.nodes}
        assert by_id[_p(sample_project, "src/E.ts")].relation is Relation.ENTRY
        assert by_id[_p(sample_project, "src/E.ts")].is_entry
        assert by_id[_p(sample_project, "src/C.ts")].relation is Relation.IMPORTER
        assert by_id[_p(sample_project, "src/A.ts")].relation is Relation.DEPENDENCY
        assert by_id[external_id("react")].relation is Relation.EXTERNAL

    def test_duplicate_imports_give_one_edge(self, make_project):
        root = make_project({
            "a.ts": "export const a = 1;\n",
            "b.ts": "import { a } from './a';\nimport a2 from './a';\n",
        })
        graph = GraphBuilder().build_whole_project(root)
        view = build_view(graph, project_wide=True)
        assert len(view.edges) == 1
        assert view.edges[0].kind is ImportKind.IMPORT

    def test_to_dict(self, sample_project):
        graph = GraphBuilder().build_focused(sample_project / "src" / "E.ts", sample_project)
        data = view_to_dict(build_view(graph))
        assert data["entry"] == _p(sample_project, "src/E.ts")
        assert {"from", "to", "kind"} == set(data["edges"][0])
        assert all("isExternal" in n for n in data["nodes"])
