"""
Doc Generator Module - writes a data dictionary for the drawn schema,
as Markdown or as a Word document with three-line tables
"""
import re
from datetime import datetime
from typing import List, Tuple

from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Cm, Pt

from .er_model import RelationshipsInput, TablesInput, to_descriptors, to_relationships

_ROLE_TAG = re.compile(r'^(.*?)\s*\((PK|FK)\)\s*$', re.IGNORECASE)


def split_column_label(label: str) -> Tuple[str, str]:
    """
    'StudentID (PK)' -> ('StudentID', 'PK')
    'Name'           -> ('Name', '')
    """
    match = _ROLE_TAG.match(label)
    if match:
        return match.group(1), match.group(2).upper()
    return label.strip(), ''


def _relationship_lines(relationships) -> List[str]:
    return [f"{rel.from_entity} → {rel.to_entity}" for rel in relationships]


def generate_markdown(tables: TablesInput, relationships: RelationshipsInput,
                      title: str = "Database Schema") -> str:
    """Markdown data dictionary: one table per entity, then the relationships"""
    descriptors = to_descriptors(tables)
    rels = to_relationships(relationships)

    lines = [f"# {title}", ""]
    for descriptor in descriptors:
        lines.append(f"## {descriptor.name}")
        lines.append("")
        lines.append("| Column | Key |")
        lines.append("| --- | --- |")
        for label in descriptor.columns:
            name, role = split_column_label(label)
            lines.append(f"| {name} | {role} |")
        lines.append("")

    if rels:
        lines.append("## Relationships")
        lines.append("")
        lines.extend(f"- {line}" for line in _relationship_lines(rels))
        lines.append("")

    return "\n".join(lines)


def _set_border(cell, edge: str, size: str) -> None:
    tc_pr = cell._tc.get_or_add_tcPr()
    tc_borders = tc_pr.find(qn('w:tcBorders'))
    if tc_borders is None:
        tc_borders = OxmlElement('w:tcBorders')
        tc_pr.append(tc_borders)

    border = OxmlElement(f'w:{edge}')
    border.set(qn('w:val'), 'single')
    border.set(qn('w:sz'), size)
    border.set(qn('w:space'), '0')
    border.set(qn('w:color'), '000000')
    tc_borders.append(border)


def _set_triple_line_style(table) -> None:
    """
    Three-line table: thick rule on top, thin rule under the header,
    thick rule at the bottom, nothing else
    """
    tbl_pr = table._tbl.tblPr
    old_borders = tbl_pr.find(qn('w:tblBorders'))
    if old_borders is not None:
        tbl_pr.remove(old_borders)

    tbl_borders = OxmlElement('w:tblBorders')
    for border_name in ['top', 'left', 'bottom', 'right', 'insideH', 'insideV']:
        border = OxmlElement(f'w:{border_name}')
        border.set(qn('w:val'), 'nil')
        tbl_borders.append(border)
    tbl_pr.append(tbl_borders)

    for cell in table.rows[0].cells:
        _set_border(cell, 'top', '12')  # 1.5pt
        _set_border(cell, 'bottom', '6')  # 0.75pt
    for cell in table.rows[-1].cells:
        _set_border(cell, 'bottom', '12')


def generate_docx(tables: TablesInput, relationships: RelationshipsInput,
                  filename: str, title: str = "Database Schema") -> str:
    """Word data dictionary with one three-line table per entity"""
    descriptors = to_descriptors(tables)
    rels = to_relationships(relationships)

    doc = Document()
    heading = doc.add_heading(title, level=0)
    heading.alignment = 1  # center

    info = doc.add_paragraph()
    info.alignment = 1
    info.add_run(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n").font.size = Pt(10)
    info.add_run(f"Tables: {len(descriptors)}\n").font.size = Pt(10)
    info.add_run(f"Columns: {sum(len(d.columns) for d in descriptors)}").font.size = Pt(10)

    for idx, descriptor in enumerate(descriptors):
        caption = doc.add_paragraph(f"Table {idx + 1}: {descriptor.name}")
        caption.alignment = 1
        caption.runs[0].font.bold = True
        caption.runs[0].font.size = Pt(12)

        tbl = doc.add_table(rows=1, cols=2)
        header = tbl.rows[0].cells
        for i, text in enumerate(("Column", "Key")):
            header[i].text = text
            for run in header[i].paragraphs[0].runs:
                run.font.bold = True
                run.font.size = Pt(10.5)

        for label in descriptor.columns:
            name, role = split_column_label(label)
            row = tbl.add_row().cells
            row[0].text = name
            row[1].text = role or '-'

        _set_triple_line_style(tbl)
        for row in tbl.rows:
            row.cells[0].width = Cm(6.0)
            row.cells[1].width = Cm(2.5)
        tbl.autofit = False

        outgoing = [rel for rel in rels if rel.from_entity == descriptor.name]
        if outgoing:
            note = doc.add_paragraph("References: " + "; ".join(_relationship_lines(outgoing)))
            note.paragraph_format.left_indent = Cm(0.5)
            note.runs[0].font.size = Pt(9)
            note.runs[0].font.italic = True

        doc.add_paragraph()

    doc.save(filename)
    return filename
