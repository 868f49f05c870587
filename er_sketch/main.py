#!/usr/bin/env python3
"""
ER Sketch - Main Program
Draws an entity-relationship sketch of a small schema, either the built-in
Students/Courses/Enrollments example or tables read from SQL DDL
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config
from .doc_generator import generate_docx, generate_markdown
from .er_model import SAMPLE_RELATIONSHIPS, SAMPLE_TABLES, build_graph
from .exceptions import ErSketchError
from .sql_parser import tables_from_sql
from .visualization import ERDiagramRenderer, layout


def sketch(tables, relationships, config: Config, output: Optional[str] = None,
           show: bool = False, strict: bool = True, dot_path: Optional[str] = None,
           markdown_path: Optional[str] = None,
           docx_path: Optional[str] = None) -> Optional[str]:
    """
    Run build -> layout -> render and write the optional side outputs

    Returns:
        Path of the rendered image, or None when only shown
    """
    print("🏗️  Building schema graph...")
    graph = build_graph(tables, relationships, strict=strict)
    print(f"   - {graph.number_of_nodes()} tables")
    print(f"   - {graph.number_of_edges()} relationships")

    print("\n📐 Computing layout...")
    positions = layout(graph, seed=config.seed)

    print("\n🎨 Rendering ER diagram...")
    renderer = ERDiagramRenderer(**config.get_render_config())
    output_path = renderer.save(graph, positions, output=output, show=show)
    if output_path:
        print(f"\n✅ ER diagram saved to: {output_path}")

    if dot_path:
        print(f"✅ DOT source saved to: {renderer.save_dot(graph, dot_path)}")

    if markdown_path:
        Path(markdown_path).parent.mkdir(parents=True, exist_ok=True)
        Path(markdown_path).write_text(generate_markdown(tables, relationships), encoding="utf-8")
        print(f"✅ Data dictionary saved to: {markdown_path}")

    if docx_path:
        Path(docx_path).parent.mkdir(parents=True, exist_ok=True)
        generate_docx(tables, relationships, docx_path)
        print(f"✅ Word data dictionary saved to: {docx_path}")

    return output_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="er-sketch",
        description="Draw an entity-relationship sketch of a schema"
    )
    parser.add_argument(
        "--sql",
        help="SQL file with CREATE TABLE statements, or '-' for stdin "
             "(default: built-in Students/Courses/Enrollments example)"
    )
    parser.add_argument(
        "-o", "--output",
        help="Image file to write; the format follows the suffix "
             "(default: <ER_SKETCH_OUTPUT_DIR>/er_diagram.png)"
    )
    parser.add_argument("--seed", type=int, help="Layout seed (default: ER_SKETCH_SEED)")
    parser.add_argument("--title", help="Diagram title")
    parser.add_argument("--show", action="store_true", help="Display the diagram window")
    parser.add_argument("--dot", help="Also write Graphviz DOT source to this file")
    parser.add_argument("--markdown", help="Also write a Markdown data dictionary to this file")
    parser.add_argument("--docx", help="Also write a Word data dictionary to this file")
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Add undeclared tables referenced by relationships instead of failing"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    args = build_parser().parse_args(argv)

    try:
        config = Config.from_env()
    except ErSketchError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.seed is not None:
        config.seed = args.seed
    if args.title:
        config.title = args.title

    output = args.output
    if output is None and not args.show:
        output = config.default_output()

    try:
        if not args.sql:
            tables, relationships = SAMPLE_TABLES, SAMPLE_RELATIONSHIPS
        else:
            if args.sql == "-":
                print("📝 Reading SQL from stdin (press Ctrl+D when done)...")
                sql_content = sys.stdin.read()
            else:
                input_path = Path(args.sql)
                if not input_path.exists():
                    print(f"❌ Error: File not found: {args.sql}", file=sys.stderr)
                    sys.exit(1)
                print(f"📝 Reading SQL from: {args.sql}")
                sql_content = input_path.read_text(encoding="utf-8")

            print("🔍 Parsing SQL statements...")
            tables, relationships = tables_from_sql(sql_content)
            print(f"✅ Found {len(tables)} table(s):")
            for table_name in tables:
                print(f"   - {table_name}")
            print()

        sketch(tables, relationships, config, output=output, show=args.show,
               strict=not args.lenient, dot_path=args.dot, markdown_path=args.markdown,
               docx_path=args.docx)
    # UnicodeDecodeError and unsupported image formats are ValueErrors
    except (ErSketchError, OSError, ValueError) as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
