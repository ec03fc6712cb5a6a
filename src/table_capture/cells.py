# src/table_capture/cells.py
from __future__ import annotations
import logging
from typing import List, Sequence

from .errors import DegenerateGrid
from .grid import GridModel
from .structures import Cell, NormalizedRect

log = logging.getLogger(__name__)


def partition_lines(vertical_lines: Sequence[float],
                    horizontal_lines: Sequence[float],
                    ) -> List[List[Cell]]:
    """Divide el cuadrado unidad en (H+1) x (V+1) celdas, en orden de lectura.

    Las filas se recorren de y alta a y baja porque el origen está abajo:
    la fila 0 es la franja superior de la imagen.
    """
    GridModel(vertical_lines=list(vertical_lines),
              horizontal_lines=list(horizontal_lines)).validate()

    xs = sorted([0.0, *vertical_lines, 1.0])
    ys = sorted([0.0, *horizontal_lines, 1.0], reverse=True)

    cells: List[List[Cell]] = []
    for r, (top, bottom) in enumerate(zip(ys, ys[1:])):
        row = [
            Cell(row=r, col=c,
                 rect=NormalizedRect(x=left, y=bottom, width=right - left, height=top - bottom))
            for c, (left, right) in enumerate(zip(xs, xs[1:]))
        ]
        cells.append(row)

    if not cells or not cells[0]:
        raise DegenerateGrid("La partición no produjo ninguna celda.")
    log.debug("Partición: %d filas x %d columnas", len(cells), len(cells[0]))
    return cells


def partition(grid: GridModel) -> List[List[Cell]]:
    return partition_lines(grid.vertical_lines, grid.horizontal_lines)
