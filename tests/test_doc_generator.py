from docx import Document

from er_sketch.doc_generator import generate_docx, generate_markdown, split_column_label
from er_sketch.er_model import SAMPLE_RELATIONSHIPS, SAMPLE_TABLES


def test_split_column_label():
    assert split_column_label("StudentID (PK)") == ("StudentID", "PK")
    assert split_column_label("CourseID (fk)") == ("CourseID", "FK")
    assert split_column_label("Grade") == ("Grade", "")


def test_markdown_sections_and_rows():
    text = generate_markdown(SAMPLE_TABLES, SAMPLE_RELATIONSHIPS)
    lines = text.splitlines()

    assert lines[0] == "# Database Schema"
    assert "## Students" in lines
    assert "| StudentID | PK |" in lines
    assert "| Grade |  |" in lines
    assert "- Enrollments → Students" in lines
    assert "- Enrollments → Courses" in lines
    # tables keep their declaration order
    assert lines.index("## Students") < lines.index("## Courses") < lines.index("## Enrollments")


def test_markdown_without_relationships_has_no_section():
    text = generate_markdown({"Solo": ["id (PK)"]}, [])
    assert "## Relationships" not in text


def test_docx_tables(tmp_path):
    path = tmp_path / "schema.docx"
    assert generate_docx(SAMPLE_TABLES, SAMPLE_RELATIONSHIPS, str(path)) == str(path)

    doc = Document(str(path))
    assert len(doc.tables) == 3

    students = doc.tables[0]
    assert [c.text for c in students.rows[0].cells] == ["Column", "Key"]
    assert [c.text for c in students.rows[1].cells] == ["StudentID", "PK"]
    assert students.rows[2].cells[1].text == "-"

    paragraphs = [p.text for p in doc.paragraphs]
    assert "References: Enrollments → Students; Enrollments → Courses" in paragraphs
