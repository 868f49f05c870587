"""
ER Sketch - entity-relationship diagrams for small schemas
"""
from .exceptions import ErSketchError, UnknownTableError, SchemaParseError, ConfigError
from .er_model import (
    TableDescriptor,
    Relationship,
    SAMPLE_TABLES,
    SAMPLE_RELATIONSHIPS,
    build_graph,
)
from .visualization import layout, render, render_er_diagram, ERDiagramRenderer
from .sql_parser import parse_sql, tables_from_sql
from .doc_generator import generate_markdown, generate_docx

__version__ = "0.1.0"

__all__ = [
    'ErSketchError',
    'UnknownTableError',
    'SchemaParseError',
    'ConfigError',
    'TableDescriptor',
    'Relationship',
    'SAMPLE_TABLES',
    'SAMPLE_RELATIONSHIPS',
    'build_graph',
    'layout',
    'render',
    'render_er_diagram',
    'ERDiagramRenderer',
    'parse_sql',
    'tables_from_sql',
    'generate_markdown',
    'generate_docx',
]
