"""
ER Model - table descriptors, relationships and the schema graph
"""
import logging
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple, Union

import networkx as nx

from .exceptions import UnknownTableError

logger = logging.getLogger(__name__)


class TableDescriptor:
    """A table as drawn in the diagram: its name and display column labels"""

    __slots__ = ("_name", "_columns")

    def __init__(self, name: str, columns: Sequence[str] = ()):
        self._name = name
        self._columns = tuple(columns)

    @property
    def name(self) -> str:
        return self._name

    @property
    def columns(self) -> Tuple[str, ...]:
        return self._columns

    def get_label(self) -> str:
        """Multi-line node label: the table name, then one column per line"""
        return "\n".join((self._name,) + self._columns)

    def __eq__(self, other):
        if not isinstance(other, TableDescriptor):
            return NotImplemented
        return (self._name, self._columns) == (other._name, other._columns)

    def __hash__(self):
        return hash((self._name, self._columns))

    def __repr__(self):
        return f"TableDescriptor(name={self._name}, columns={len(self._columns)})"


class Relationship:
    """A directed foreign-key edge, child table -> parent table"""

    __slots__ = ("_from_entity", "_to_entity")

    def __init__(self, from_entity: str, to_entity: str):
        self._from_entity = from_entity
        self._to_entity = to_entity

    @property
    def from_entity(self) -> str:
        return self._from_entity

    @property
    def to_entity(self) -> str:
        return self._to_entity

    def as_tuple(self) -> Tuple[str, str]:
        return self._from_entity, self._to_entity

    def __iter__(self):
        return iter(self.as_tuple())

    def __eq__(self, other):
        if isinstance(other, Relationship):
            return self.as_tuple() == other.as_tuple()
        if isinstance(other, tuple):
            return self.as_tuple() == other
        return NotImplemented

    def __hash__(self):
        return hash(self.as_tuple())

    def __repr__(self):
        return f"Relationship({self._from_entity} -> {self._to_entity})"


TablesInput = Union[Mapping[str, Sequence[str]], Iterable[TableDescriptor]]
RelationshipsInput = Iterable[Union[Relationship, Tuple[str, str]]]


# Sample schema used when no DDL is supplied
SAMPLE_TABLES: Dict[str, List[str]] = {
    "Students": ["StudentID (PK)", "Name", "Age"],
    "Courses": ["CourseID (PK)", "CourseName", "Credits"],
    "Enrollments": ["EnrollmentID (PK)", "StudentID (FK)", "CourseID (FK)", "Grade"],
}

SAMPLE_RELATIONSHIPS: List[Tuple[str, str]] = [
    ("Enrollments", "Students"),
    ("Enrollments", "Courses"),
]


def to_descriptors(tables: TablesInput) -> List[TableDescriptor]:
    """Normalize a name -> labels mapping (or descriptors) into descriptors"""
    if isinstance(tables, Mapping):
        return [TableDescriptor(name, columns) for name, columns in tables.items()]
    return [t if isinstance(t, TableDescriptor) else TableDescriptor(*t) for t in tables]


def to_relationships(relationships: RelationshipsInput) -> List[Relationship]:
    """Normalize (source, target) pairs into Relationship objects"""
    result = []
    for rel in relationships:
        if isinstance(rel, Relationship):
            result.append(rel)
        else:
            source, target = rel
            result.append(Relationship(source, target))
    return result


def build_graph(tables: TablesInput, relationships: RelationshipsInput,
                strict: bool = True) -> nx.DiGraph:
    """
    Build the directed schema graph

    Args:
        tables: mapping of table name to column labels, or TableDescriptors
        relationships: (source, target) pairs or Relationship objects
        strict: raise UnknownTableError for edges that reference undeclared
            tables; when False such tables are added as unlabeled nodes

    Returns:
        networkx.DiGraph with a 'label' and 'columns' attribute on every node
    """
    descriptors = to_descriptors(tables)
    rels = to_relationships(relationships)

    declared = {d.name for d in descriptors}
    if strict:
        # Validate before building so a failure leaves nothing half-made
        for rel in rels:
            for endpoint in rel:
                if endpoint not in declared:
                    raise UnknownTableError(endpoint, rel.as_tuple())

    graph = nx.DiGraph()
    for descriptor in descriptors:
        graph.add_node(descriptor.name, label=descriptor.get_label(),
                       columns=list(descriptor.columns))

    for rel in rels:
        for endpoint in rel:
            if endpoint not in graph:
                logger.warning(f"Relationship {rel.from_entity} -> {rel.to_entity} "
                               f"references undeclared table '{endpoint}', adding it without columns")
                graph.add_node(endpoint, label=endpoint, columns=[])
        graph.add_edge(rel.from_entity, rel.to_entity)

    logger.debug(f"Built schema graph: {graph.number_of_nodes()} nodes, "
                 f"{graph.number_of_edges()} edges")
    return graph
