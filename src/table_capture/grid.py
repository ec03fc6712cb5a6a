# src/table_capture/grid.py
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .errors import DegenerateGrid
from .structures import Axis, GridSelection

log = logging.getLogger(__name__)

MIN_LINE_POSITION = 0.01
MAX_LINE_POSITION = 0.99


def clamp_line_position(position: float) -> float:
    return max(MIN_LINE_POSITION, min(MAX_LINE_POSITION, float(position)))


def widest_gap_midpoint(lines: Sequence[float]) -> float:
    """Punto medio del hueco más grande entre 0, las líneas ordenadas y 1.

    Sin líneas devuelve 0.5. Con huecos idénticos gana el primero
    (np.argmax devuelve el primer máximo).
    """
    bounds = np.concatenate(([0.0], np.sort(np.asarray(lines, dtype=float)), [1.0]))
    gaps = np.diff(bounds)
    i = int(np.argmax(gaps))
    return float((bounds[i] + bounds[i + 1]) / 2.0)


@dataclass
class GridModel:
    """Líneas de la rejilla editables por el usuario.

    Las listas se guardan en orden de inserción; se ordenan solo al usarlas.
    """
    vertical_lines: List[float] = field(default_factory=list)
    horizontal_lines: List[float] = field(default_factory=list)
    selection: Optional[GridSelection] = None

    def lines(self, axis: Axis) -> List[float]:
        if Axis(axis) is Axis.VERTICAL:
            return self.vertical_lines
        return self.horizontal_lines

    def sorted_lines(self, axis: Axis) -> List[float]:
        return sorted(self.lines(axis))

    @property
    def shape(self) -> Tuple[int, int]:
        """(filas, columnas) de la partición resultante."""
        return len(self.horizontal_lines) + 1, len(self.vertical_lines) + 1

    @property
    def is_empty(self) -> bool:
        return not self.vertical_lines and not self.horizontal_lines

    def copy(self) -> "GridModel":
        return GridModel(
            vertical_lines=list(self.vertical_lines),
            horizontal_lines=list(self.horizontal_lines),
            selection=self.selection,
        )

    def _add_line(self, axis: Axis) -> float:
        lines = self.lines(axis)
        position = widest_gap_midpoint(lines)
        lines.append(position)
        log.debug("Línea %s añadida en %.4f", axis.value, position)
        return position

    def add_column(self) -> float:
        return self._add_line(Axis.VERTICAL)

    def add_row(self) -> float:
        return self._add_line(Axis.HORIZONTAL)

    def select(self, axis: Axis, index: int) -> GridSelection:
        self.selection = GridSelection(axis=Axis(axis), index=index)
        return self.selection

    def remove_line(self, selection: Optional[GridSelection] = None) -> Optional[float]:
        """Elimina la línea seleccionada. Un índice fuera de rango no hace nada."""
        target = selection if selection is not None else self.selection
        # limpiar la selección ANTES de mutar las listas
        self.selection = None
        if target is None:
            return None
        lines = self.lines(target.axis)
        if 0 <= target.index < len(lines):
            removed = lines.pop(target.index)
            log.debug("Línea %s eliminada (índice %d, posición %.4f)", target.axis.value, target.index, removed)
            return removed
        log.debug("Índice %d fuera de rango para %s; nada que eliminar.", target.index, target.axis.value)
        return None

    def clear_all(self) -> None:
        self.vertical_lines.clear()
        self.horizontal_lines.clear()
        self.selection = None

    def set_line_position(self, axis: Axis, index: int, position: float) -> float:
        lines = self.lines(axis)
        if not 0 <= index < len(lines):
            raise IndexError(f"No existe la línea {Axis(axis).value} con índice {index}")
        lines[index] = clamp_line_position(position)
        return lines[index]

    def validate(self) -> None:
        """Rechaza posiciones no finitas o fuera de (0, 1); no corrige nada."""
        for axis in (Axis.VERTICAL, Axis.HORIZONTAL):
            for value in self.lines(axis):
                if not math.isfinite(value) or not 0.0 < value < 1.0:
                    raise DegenerateGrid(f"Línea {axis.value} fuera de (0, 1): {value!r}")
