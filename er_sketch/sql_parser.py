"""
SQL DDL parser - reads CREATE TABLE / ALTER TABLE statements into
table descriptors and foreign-key relationships
"""
import logging
import re
from typing import Any, Dict, List, Tuple

from .exceptions import SchemaParseError

logger = logging.getLogger(__name__)

_IDENT = r'[`"\[]?(\w+)[`"\]]?'

_CREATE_RE = re.compile(r'CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?' + _IDENT + r'\s*\(',
                        re.IGNORECASE)
_ALTER_RE = re.compile(r'ALTER\s+TABLE\s+' + _IDENT + r'\s+(.*?)(?:;|$)',
                       re.IGNORECASE | re.DOTALL)
_TABLE_FK_RE = re.compile(
    r'FOREIGN\s+KEY\s*\(([^)]+)\)\s*REFERENCES\s+' + _IDENT + r'\s*(?:\(([^)]+)\))?',
    re.IGNORECASE)
_INLINE_REF_RE = re.compile(r'REFERENCES\s+' + _IDENT + r'\s*(?:\(([^)]+)\))?',
                            re.IGNORECASE)
_COLUMN_RE = re.compile(r'^' + _IDENT + r'\s+(\w+(?:\s*\([^)]*\))?)', re.IGNORECASE)
_CONSTRAINT_PREFIX = r'^\s*(?:CONSTRAINT\s+' + _IDENT + r'\s+)?'

_QUOTES = ("'", '"', '`')
# Quote styles in which a backslash escapes the next character
_ESCAPING_QUOTES = ("'", '"')


def parse_sql(sql: str) -> Dict[str, Dict[str, Any]]:
    """
    Parse DDL text

    Returns:
        {table_name: {'columns': [{'name', 'type', 'pk'}...],
                      'primary_keys': [...],
                      'foreign_keys': [{'column', 'ref': {'table', 'column'}}...]}}
        in declaration order

    Raises:
        SchemaParseError: no CREATE TABLE statement was found
    """
    sql = _strip_comments(sql)
    tables: Dict[str, Dict[str, Any]] = {}

    pos = 0
    while True:
        match = _CREATE_RE.search(sql, pos)
        if not match:
            break
        table_name = match.group(1)
        body_start = match.end()
        body_end = _find_closing_paren(sql, body_start)
        if body_end is None:
            raise SchemaParseError(f"Unbalanced parentheses in CREATE TABLE {table_name}")

        tables[table_name] = _parse_table_body(sql[body_start:body_end])
        logger.debug(f"Parsed table {table_name}: {len(tables[table_name]['columns'])} columns")
        pos = body_end + 1

    # Foreign keys added after the fact
    for match in _ALTER_RE.finditer(sql):
        table_name, alter_content = match.group(1), match.group(2)
        if table_name not in tables:
            logger.warning(f"ALTER TABLE for unknown table {table_name} ignored")
            continue
        for fk_match in _TABLE_FK_RE.finditer(alter_content):
            _add_foreign_key(tables[table_name]['foreign_keys'], fk_match)

    if not tables:
        raise SchemaParseError("No CREATE TABLE statements found in the SQL")
    return tables


def _strip_comments(sql: str) -> str:
    """Drop -- and /* */ comments that sit outside quoted text"""
    out = []
    quote_char = None
    i = 0
    n = len(sql)
    while i < n:
        char = sql[i]
        if quote_char:
            out.append(char)
            if char == '\\' and quote_char in _ESCAPING_QUOTES and i + 1 < n:
                out.append(sql[i + 1])
                i += 2
                continue
            if char == quote_char:
                quote_char = None
            i += 1
            continue

        if char in _QUOTES:
            quote_char = char
        elif sql.startswith('--', i):
            end = sql.find('\n', i)
            i = n if end == -1 else end
            continue
        elif sql.startswith('/*', i):
            end = sql.find('*/', i + 2)
            i = n if end == -1 else end + 2
            out.append(' ')
            continue
        out.append(char)
        i += 1
    return ''.join(out)


def _blank_literals(text: str) -> str:
    """Replace the inside of '...' strings with spaces, keeping offsets"""
    out = []
    quote_char = None
    escaped = False
    for char in text:
        if quote_char:
            if escaped:
                escaped = False
                out.append(' ')
            elif char == '\\' and quote_char in _ESCAPING_QUOTES:
                escaped = True
                out.append(' ')
            elif char == quote_char:
                quote_char = None
                out.append(char)
            else:
                out.append(' ')
        else:
            if char == "'":
                quote_char = char
            out.append(char)
    return ''.join(out)


def _find_closing_paren(sql: str, start: int):
    """Index of the ')' closing a '(' that sits just before ``start``"""
    depth = 1
    quote_char = None
    escaped = False
    for i in range(start, len(sql)):
        char = sql[i]
        if quote_char:
            if escaped:
                escaped = False
            elif char == '\\' and quote_char in _ESCAPING_QUOTES:
                escaped = True
            elif char == quote_char:
                quote_char = None
            continue
        if char in _QUOTES:
            quote_char = char
        elif char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth == 0:
                return i
    return None


def smart_split(content: str) -> List[str]:
    """Split on top-level commas, keeping DECIMAL(10,2) and quoted text intact"""
    parts = []
    current = ''
    depth = 0
    quote_char = None
    escaped = False

    for char in content:
        if quote_char:
            if escaped:
                escaped = False
            elif char == '\\' and quote_char in _ESCAPING_QUOTES:
                escaped = True
            elif char == quote_char:
                quote_char = None
        elif char in _QUOTES:
            quote_char = char
        elif char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
        elif char == ',' and depth == 0:
            parts.append(current.strip())
            current = ''
            continue
        current += char

    if current.strip():
        parts.append(current.strip())
    return parts


def _parse_table_body(body: str) -> Dict[str, Any]:
    columns = []
    primary_keys: List[str] = []
    foreign_keys: List[Dict[str, Any]] = []

    for part in smart_split(body):
        # Keywords inside COMMENT or DEFAULT strings must not count
        plain = _blank_literals(part)
        upper_part = plain.upper()

        if re.match(_CONSTRAINT_PREFIX + r'PRIMARY\s+KEY', upper_part):
            pk_match = re.search(r'PRIMARY\s+KEY\s*\(([^)]+)\)', part, re.IGNORECASE)
            if pk_match:
                primary_keys.extend(_split_columns(pk_match.group(1)))
            continue
        if re.match(_CONSTRAINT_PREFIX + r'FOREIGN\s+KEY', upper_part):
            fk_match = _TABLE_FK_RE.search(plain)
            if fk_match:
                _add_foreign_key(foreign_keys, fk_match)
            continue
        if re.match(_CONSTRAINT_PREFIX + r'(UNIQUE|CHECK)\b', upper_part) or \
                re.match(r'^\s*(KEY|INDEX)\s+', upper_part):
            continue

        col_match = _COLUMN_RE.match(part)
        if not col_match:
            logger.debug(f"Skipping unrecognised table element: {part}")
            continue

        col_name = col_match.group(1)
        is_pk = bool(re.search(r'PRIMARY\s+KEY', upper_part))
        columns.append({
            'name': col_name,
            'type': re.sub(r'\s+', '', col_match.group(2)).upper(),
            'pk': is_pk,
        })
        if is_pk:
            primary_keys.append(col_name)

        ref_match = _INLINE_REF_RE.search(plain)
        if ref_match:
            ref_column = _split_columns(ref_match.group(2))[0] if ref_match.group(2) else col_name
            foreign_keys.append({
                'column': col_name,
                'ref': {'table': ref_match.group(1), 'column': ref_column},
            })

    for col in columns:
        if col['name'] in primary_keys:
            col['pk'] = True

    return {
        'columns': columns,
        'primary_keys': list(dict.fromkeys(primary_keys)),
        'foreign_keys': foreign_keys,
    }


def _split_columns(text: str) -> List[str]:
    return [col.strip().strip('`"[]') for col in text.split(',')]


def _add_foreign_key(foreign_keys: List[Dict[str, Any]], fk_match) -> None:
    local_cols = _split_columns(fk_match.group(1))
    ref_table = fk_match.group(2)
    ref_cols = _split_columns(fk_match.group(3)) if fk_match.group(3) else local_cols

    for i, local_col in enumerate(local_cols):
        foreign_keys.append({
            'column': local_col,
            'ref': {
                'table': ref_table,
                'column': ref_cols[i] if i < len(ref_cols) else local_col,
            },
        })


def tables_from_sql(sql: str) -> Tuple[Dict[str, List[str]], List[Tuple[str, str]]]:
    """
    Turn DDL into the diagram's input shapes

    Column labels carry a cosmetic ' (PK)' / ' (FK)' tag; relationships run
    child -> parent, one per referenced table.
    """
    parsed = parse_sql(sql)
    tables: Dict[str, List[str]] = {}
    relationships: List[Tuple[str, str]] = []

    for table_name, data in parsed.items():
        fk_columns = {fk['column'] for fk in data['foreign_keys']}
        labels = []
        for col in data['columns']:
            if col['pk']:
                labels.append(f"{col['name']} (PK)")
            elif col['name'] in fk_columns:
                labels.append(f"{col['name']} (FK)")
            else:
                labels.append(col['name'])
        tables[table_name] = labels

        for fk in data['foreign_keys']:
            rel = (table_name, fk['ref']['table'])
            if rel not in relationships:
                relationships.append(rel)

    logger.info(f"Loaded {len(tables)} table(s) and {len(relationships)} relationship(s) from SQL")
    return tables, relationships
