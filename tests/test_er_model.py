import networkx as nx
import pytest

from er_sketch.er_model import (
    Relationship,
    SAMPLE_RELATIONSHIPS,
    SAMPLE_TABLES,
    TableDescriptor,
    build_graph,
)
from er_sketch.exceptions import ErSketchError, UnknownTableError


def test_one_node_per_table_with_ordered_label():
    tables = {
        "Orders": ["OrderID (PK)", "CustomerID (FK)", "Total"],
        "Customers": ["CustomerID (PK)", "Name"],
    }
    graph = build_graph(tables, [])

    assert set(graph.nodes) == {"Orders", "Customers"}
    for name, columns in tables.items():
        label = graph.nodes[name]["label"]
        assert label.split("\n") == [name] + columns
        assert graph.nodes[name]["columns"] == columns


def test_edges_preserve_direction():
    tables = {"A": [], "B": [], "C": []}
    relationships = [("A", "B"), ("C", "B"), ("B", "A")]
    graph = build_graph(tables, relationships)

    assert graph.number_of_edges() == 3
    assert sorted(graph.edges) == sorted(relationships)
    assert graph.has_edge("A", "B") and graph.has_edge("B", "A")
    assert not graph.has_edge("B", "C")


def test_sample_schema_shape(sample_graph):
    assert isinstance(sample_graph, nx.DiGraph)
    assert sample_graph.number_of_nodes() == 3
    assert sample_graph.number_of_edges() == 2
    assert sample_graph.out_degree("Enrollments") == 2
    for parent in ("Students", "Courses"):
        assert sample_graph.in_degree(parent) == 1
        assert sample_graph.out_degree(parent) == 0


def test_empty_input_gives_empty_graph():
    graph = build_graph({}, [])
    assert graph.number_of_nodes() == 0
    assert graph.number_of_edges() == 0


def test_table_without_columns_label_is_name():
    graph = build_graph({"Audit": []}, [])
    assert graph.nodes["Audit"]["label"] == "Audit"


def test_accepts_descriptor_and_relationship_objects():
    tables = [TableDescriptor("Parent", ["id (PK)"]), TableDescriptor("Child", ["parent_id (FK)"])]
    graph = build_graph(tables, [Relationship("Child", "Parent")])

    assert graph.nodes["Child"]["label"] == "Child\nparent_id (FK)"
    assert list(graph.edges) == [("Child", "Parent")]


def test_dangling_reference_raises_in_strict_mode():
    with pytest.raises(UnknownTableError) as exc_info:
        build_graph(SAMPLE_TABLES, SAMPLE_RELATIONSHIPS + [("Enrollments", "Teachers")])

    err = exc_info.value
    assert err.table == "Teachers"
    assert err.relationship == ("Enrollments", "Teachers")
    assert "unknown table reference 'Teachers'" in str(err)
    assert isinstance(err, ErSketchError)
    assert isinstance(err, KeyError)


def test_dangling_source_is_reported_too():
    with pytest.raises(UnknownTableError) as exc_info:
        build_graph({"Parent": []}, [("Ghost", "Parent")])
    assert exc_info.value.table == "Ghost"


def test_dangling_reference_auto_inserted_in_lenient_mode(caplog):
    with caplog.at_level("WARNING", logger="er_sketch.er_model"):
        graph = build_graph(SAMPLE_TABLES, SAMPLE_RELATIONSHIPS + [("Enrollments", "Teachers")],
                            strict=False)

    assert graph.number_of_nodes() == 4
    assert graph.nodes["Teachers"]["label"] == "Teachers"
    assert graph.nodes["Teachers"]["columns"] == []
    assert graph.has_edge("Enrollments", "Teachers")
    assert "Teachers" in caplog.text


def test_descriptor_is_immutable():
    descriptor = TableDescriptor("T", ["a", "b"])
    assert descriptor.columns == ("a", "b")
    with pytest.raises(AttributeError):
        descriptor.name = "U"


def test_relationship_compares_to_tuple():
    rel = Relationship("Enrollments", "Students")
    assert rel == ("Enrollments", "Students")
    assert tuple(rel) == ("Enrollments", "Students")
    assert repr(rel) == "Relationship(Enrollments -> Students)"
