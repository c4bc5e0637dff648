"""Convert an analysed graph into renderer nodes and edges."""

from __future__ import annotations

from import_map.models import (
    Graph,
    GraphEdge,
    GraphNode,
    GraphView,
    Relation,
)

EXTERNAL_PREFIX = "external:"


def external_id(source: str) -> str:
    return f"{EXTERNAL_PREFIX}{source}"


def build_view(graph: Graph, project_wide: bool = False) -> GraphView:
    """Build the node/edge lists for *graph*.

    Every file record becomes a node. External modules become nodes in
    project-wide display, or otherwise only when imported by the entry file.
    An edge points from the dependency to the file that imports it.
    """
    entry = graph.entry_file if graph.entry_file in graph.files else None
    view = GraphView(entry_id=entry)
    nodes: dict[str, GraphNode] = {}
    edges: dict[GraphEdge, None] = {}

    for path, record in graph.files.items():
        nodes[path] = GraphNode(
            id=path,
            label=record.name,
            path=path,
            is_entry=path == entry,
        )

    for path, record in graph.files.items():
        for imp in record.imports:
            if imp.is_external:
                if not (project_wide or path == entry):
                    continue
                module_id = external_id(imp.raw_source)
                if module_id not in nodes:
                    nodes[module_id] = GraphNode(
                        id=module_id,
                        label=imp.raw_source,
                        path=imp.raw_source,
                        is_external=True,
                        relation=Relation.EXTERNAL,
                    )
                edges.setdefault(GraphEdge(module_id, path, imp.kind), None)
            elif imp.resolved_path in graph.files and imp.resolved_path != path:
                edges.setdefault(GraphEdge(imp.resolved_path, path, imp.kind), None)

    view.nodes = list(nodes.values())
    view.edges = list(edges)
    _assign_relations(view)
    return view


def _assign_relations(view: GraphView) -> None:
    if view.entry_id is None:
        return
    importers = {e.to_id for e in view.edges if e.from_id == view.entry_id}
    dependencies = {e.from_id for e in view.edges if e.to_id == view.entry_id}
    for node in view.nodes:
        if node.is_entry:
            node.relation = Relation.ENTRY
        elif node.is_external:
            node.relation = Relation.EXTERNAL
        elif node.id in importers:
            node.relation = Relation.IMPORTER
        elif node.id in dependencies:
            node.relation = Relation.DEPENDENCY


def view_to_dict(view: GraphView) -> dict:
    return {
        "entry": view.entry_id,
        "nodes": [
            {
                "id": n.id,
                "label": n.label,
                "path": n.path,
                "isExternal": n.is_external,
                "isEntry": n.is_entry,
                "relation": n.relation.value,
            }
            for n in view.nodes
        ],
        "edges": [
            {"from": e.from_id, "to": e.to_id, "kind": e.kind.value}
            for e in view.edges
        ],
    }
