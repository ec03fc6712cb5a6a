# src/table_capture/exporters.py
from __future__ import annotations
from enum import Enum
from pathlib import Path
from typing import List, Sequence, Union
import csv
import io


class TableFormat(str, Enum):
    CSV = "csv"
    MARKDOWN = "markdown"


def pad_rows(table: Sequence[Sequence[str]]) -> List[List[str]]:
    """Copia de la tabla con cada fila rellenada con "" hasta la fila más larga."""
    width = max((len(r) for r in table), default=0)
    return [list(r) + [""] * (width - len(r)) for r in table]


def _check_rectangular(rows: List[List[str]]) -> int:
    widths = {len(r) for r in rows}
    if len(widths) > 1:
        raise ValueError(f"Tabla irregular tras el relleno: anchos {sorted(widths)}")
    return widths.pop() if widths else 0


def to_csv(table: Sequence[Sequence[str]]) -> str:
    """CSV con TODOS los campos entre comillas y comillas internas duplicadas.

    Así comas y saltos de línea dentro de una celda nunca requieren
    tratamiento especial. Filas separadas por '\\n', sin salto final.
    """
    rows = pad_rows(table)
    if not rows:
        return ""
    _check_rectangular(rows)
    buf = io.StringIO()
    w = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    w.writerows(rows)
    out = buf.getvalue()
    return out[:-1] if out.endswith("\n") else out


def _escape_markdown_cell(cell: str, preserve_multiline: bool) -> str:
    escaped = cell.replace("|", "\\|")
    if preserve_multiline:
        escaped = escaped.replace("\n", "<br/>")
    return escaped


def to_markdown(table: Sequence[Sequence[str]], preserve_multiline: bool = False) -> str:
    rows = pad_rows(table)
    if not rows:
        return ""
    n_cols = _check_rectangular(rows)

    lines: List[str] = []
    for idx, row in enumerate(rows):
        cells = [_escape_markdown_cell(c, preserve_multiline) for c in row]
        lines.append("| " + " | ".join(cells) + " |")
        if idx == 0:
            # separador de cabecera solo tras la primera fila
            lines.append("| " + " | ".join(["---"] * n_cols) + " |")
    return "\n".join(lines)


def serialize(table: Sequence[Sequence[str]],
              fmt: Union[TableFormat, str] = TableFormat.CSV,
              preserve_multiline: bool = False) -> str:
    fmt = TableFormat(fmt)
    if fmt is TableFormat.MARKDOWN:
        return to_markdown(table, preserve_multiline=preserve_multiline)
    return to_csv(table)


def write_table(text: str, path: str, fmt: Union[TableFormat, str] = TableFormat.CSV) -> None:
    # CSV con BOM para que Excel detecte UTF-8
    encoding = "utf-8-sig" if TableFormat(fmt) is TableFormat.CSV else "utf-8"
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding=encoding, newline="") as f:
        f.write(text)
