from __future__ import annotations
import logging
from typing import Iterable, List, Sequence

import numpy as np

from .grid import GridModel
from .structures import TextFragment

log = logging.getLogger(__name__)

COLUMN_THRESHOLD = 0.05  # 5% del ancho
ROW_THRESHOLD = 0.02     # 2% del alto
EDGE_MARGIN = 0.05
UPPER_EDGE_MARGIN = 0.95


def cluster_positions(positions: Iterable[float], threshold: float) -> List[float]:
    """Agrupa posiciones en una sola pasada sobre la lista ordenada.

    Si un valor queda a <= `threshold` del representante del último grupo,
    el representante pasa a ser el punto medio de ambos; si no, se abre un
    grupo nuevo. No es una media real: depende del orden, y es O(n).
    """
    values = np.sort(np.asarray(list(positions), dtype=float))
    if values.size == 0:
        return []

    clusters: List[float] = [float(values[0])]
    for value in values[1:]:
        value = float(value)
        if abs(value - clusters[-1]) <= threshold:
            clusters[-1] = (clusters[-1] + value) / 2.0
        else:
            clusters.append(value)
    return clusters


def column_candidates(fragments: Sequence[TextFragment]) -> List[float]:
    # borde izquierdo del texto
    return [f.box.x for f in fragments]


def row_candidates(fragments: Sequence[TextFragment]) -> List[float]:
    # bordes inferior y superior: la separación cabecera/datos puede estar en cualquiera
    edges: List[float] = []
    for f in fragments:
        edges.append(f.box.y)
        edges.append(f.box.max_y)
    return edges


def infer_initial_grid(fragments: Sequence[TextFragment],
                       column_threshold: float = COLUMN_THRESHOLD,
                       row_threshold: float = ROW_THRESHOLD,
                       ) -> GridModel:
    """Propone una rejilla inicial a partir de los fragmentos de toda la imagen.

    Es best-effort: sin fragmentos devuelve una rejilla vacía.
    """
    if not fragments:
        log.info("Sin fragmentos OCR; la rejilla inicial queda vacía.")
        return GridModel()

    columns = cluster_positions(column_candidates(fragments), column_threshold)
    rows = cluster_positions(row_candidates(fragments), row_threshold)

    vertical = [x for x in columns if x > EDGE_MARGIN]
    horizontal = [y for y in rows if EDGE_MARGIN < y < UPPER_EDGE_MARGIN]

    log.info("Rejilla inferida: %d líneas verticales, %d horizontales (de %d fragmentos).",
             len(vertical), len(horizontal), len(fragments))
    return GridModel(vertical_lines=vertical, horizontal_lines=horizontal)
