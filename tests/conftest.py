import os

os.environ.setdefault("MPLBACKEND", "Agg")

import matplotlib

matplotlib.use("Agg")

import pytest

from er_sketch.er_model import SAMPLE_RELATIONSHIPS, SAMPLE_TABLES, build_graph


ER_ENV_VARS = [
    "ER_SKETCH_OUTPUT_DIR",
    "ER_SKETCH_SEED",
    "ER_SKETCH_TITLE",
    "ER_SKETCH_NODE_COLOR",
    "ER_SKETCH_NODE_SIZE",
    "ER_SKETCH_FIGSIZE",
    "ER_SKETCH_DPI",
    "ER_SKETCH_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Tests never see settings from the developer's shell or .env"""
    for name in ER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_graph():
    return build_graph(SAMPLE_TABLES, SAMPLE_RELATIONSHIPS)


@pytest.fixture
def library_sql():
    return """
    -- library schema
    CREATE TABLE authors (
        author_id INT PRIMARY KEY,
        name VARCHAR(100) NOT NULL
    );

    CREATE TABLE IF NOT EXISTS `books` (
        `book_id` INT NOT NULL,
        `title` VARCHAR(255),
        `price` DECIMAL(10,2) DEFAULT 0.00,
        `author_id` INT,
        PRIMARY KEY (`book_id`),
        CONSTRAINT fk_author FOREIGN KEY (`author_id`) REFERENCES authors(author_id)
    );

    /* loans reference both members and books */
    CREATE TABLE loans (
        loan_id INT PRIMARY KEY,
        book_id INT REFERENCES books(book_id),
        member_id INT,
        loaned_on DATE
    );

    CREATE TABLE members (
        member_id INT PRIMARY KEY,
        email VARCHAR(200) UNIQUE
    );

    ALTER TABLE loans ADD CONSTRAINT fk_member FOREIGN KEY (member_id) REFERENCES members(member_id);
    """
