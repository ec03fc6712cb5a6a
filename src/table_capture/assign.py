from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .structures import Cell, TextFragment

log = logging.getLogger(__name__)

Table = List[List[str]]
CellFragments = List[List[Optional[List[TextFragment]]]]


@dataclass(frozen=True)
class CellObservation:
    cell: Cell
    fragments: Sequence[TextFragment]
    text: str


CellObserver = Callable[[CellObservation], None]


def order_fragments(fragments: Sequence[TextFragment]) -> List[TextFragment]:
    """Orden de arriba a abajo: y de origen (borde inferior) descendente, ya
    que el origen está abajo-izquierda. Estable ante empates."""
    return sorted(fragments, key=lambda f: -f.box.y)


def merge_fragments(fragments: Sequence[TextFragment],
                    preserve_multiline: bool = False) -> str:
    """Une los fragmentos de una celda con espacio, o con salto de línea si se conserva el multilínea."""
    separator = "\n" if preserve_multiline else " "
    parts = [f.text.strip() for f in order_fragments(fragments)]
    return separator.join(p for p in parts if p)


def assign_and_merge(cells: Sequence[Sequence[Cell]],
                     per_cell_fragments: CellFragments,
                     preserve_multiline: bool = False,
                     observer: Optional[CellObserver] = None,
                     ) -> Table:
    """Construye la tabla a partir del OCR de cada celda.

    `per_cell_fragments[r][c]` contiene los fragmentos reconocidos en el
    recorte de `cells[r][c]`, en el espacio normalizado local de ese recorte.
    `None` indica que el recorte o el OCR fallaron; la celda queda vacía.
    """
    table: Table = []
    for r, row in enumerate(cells):
        texts: List[str] = []
        for c, cell in enumerate(row):
            frags = _fragments_at(per_cell_fragments, r, c) or []
            text = merge_fragments(frags, preserve_multiline=preserve_multiline)
            texts.append(text)
            if observer is not None:
                observer(CellObservation(cell=cell, fragments=tuple(frags), text=text))
        table.append(texts)
    return table


def _fragments_at(matrix: CellFragments, r: int, c: int) -> Optional[List[TextFragment]]:
    if r >= len(matrix) or c >= len(matrix[r]):
        return None
    return matrix[r][c]


def assign_by_containment(cells: Sequence[Sequence[Cell]],
                          fragments: Sequence[TextFragment],
                          ) -> CellFragments:
    """Reparte fragmentos de la imagen completa en la celda que contiene su centro.

    Un centro sobre un borde compartido va a la primera celda en orden de lectura.
    """
    buckets: CellFragments = [[[] for _ in row] for row in cells]
    for frag in fragments:
        cx, cy = frag.box.mid_x, frag.box.mid_y
        target = None
        for row in cells:
            for cell in row:
                if cell.rect.contains(cx, cy):
                    target = cell
                    break
            if target is not None:
                break
        if target is None:
            log.debug("Fragmento %r fuera de la rejilla (%.3f, %.3f); se descarta.", frag.text, cx, cy)
            continue
        buckets[target.row][target.col].append(frag)  # type: ignore[union-attr]
    return buckets
