from __future__ import annotations

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Dict, List, Optional, Sequence, Tuple

from PIL import Image

from .assign import CellFragments, CellObserver, Table, assign_and_merge
from .cells import partition
from .config import ExtractionConfig
from .errors import ExtractionCancelled, ImageCropFailure, NoTextRecognized, OcrEngineError
from .exporters import serialize
from .grid import GridModel
from .grid_inference import infer_initial_grid
from .imaging import crop_cell, preprocess_for_ocr
from .ocr_engines import OcrEngine
from .structures import Cell, TextFragment

log = logging.getLogger(__name__)


class TableExtractor:
    """
    Orquesta la extracción por celdas: partición de la rejilla, OCR de cada
    recorte, fusión del texto y serialización.

    `engine` reconoce el texto de cada celda; `grid_engine` (por defecto el
    mismo) se usa una sola vez sobre la imagen completa para proponer la
    rejilla inicial.
    """

    def __init__(
        self,
        engine: OcrEngine,
        config: Optional[ExtractionConfig] = None,
        *,
        grid_engine: Optional[OcrEngine] = None,
        observer: Optional[CellObserver] = None,
    ) -> None:
        self.engine = engine
        self.grid_engine = grid_engine or engine
        self.config = config or ExtractionConfig()
        self.observer = observer

    # --- Rejilla inicial ---

    def recognize_full_image(self, image: Image.Image) -> List[TextFragment]:
        try:
            return self.grid_engine.recognize_text(image)
        except OcrEngineError as exc:
            log.warning("OCR de la imagen completa falló (%s); rejilla vacía.", exc)
            return []

    def detect_initial_grid(self, image: Image.Image) -> GridModel:
        return infer_initial_grid(self.recognize_full_image(image))

    # --- OCR por celda ---

    def _recognize_cell(self, image: Image.Image, cell: Cell) -> Optional[List[TextFragment]]:
        try:
            crop = crop_cell(image, cell.rect)
        except ImageCropFailure as exc:
            log.warning("Celda [%d][%d]: no se pudo recortar (%s).", cell.row, cell.col, exc)
            return None
        if self.config.preprocess:
            crop = preprocess_for_ocr(crop, min_height=self.config.min_cell_height)
        try:
            return self.engine.recognize_text(crop)
        except OcrEngineError as exc:
            log.warning("Celda [%d][%d]: OCR falló (%s).", cell.row, cell.col, exc)
            return None

    def recognize_cells(
        self,
        image: Image.Image,
        cells: Sequence[Sequence[Cell]],
        cancel_event: Optional[threading.Event] = None,
    ) -> CellFragments:
        """
        Ejecuta el OCR de cada celda y devuelve una matriz [fila][col] con los
        fragmentos (None si el recorte o el OCR fallaron).

        Cada resultado se escribe en su posición fija, así el orden final no
        depende del orden en que terminan los hilos. Si `cancel_event` se
        activa, se lanza ExtractionCancelled y no se devuelve nada.
        """
        results: CellFragments = [[None for _ in row] for row in cells]
        flat = [cell for row in cells for cell in row]

        def _check_cancelled() -> None:
            if cancel_event is not None and cancel_event.is_set():
                raise ExtractionCancelled("Extracción cancelada.")

        if self.config.max_workers <= 1:
            for cell in flat:
                _check_cancelled()
                results[cell.row][cell.col] = self._recognize_cell(image, cell)
            _check_cancelled()
            return results

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
            futures: Dict[Future, Tuple[int, int]] = {
                pool.submit(self._recognize_cell, image, cell): (cell.row, cell.col) for cell in flat
            }
            pending = set(futures)
            try:
                while pending:
                    _check_cancelled()
                    done, pending = wait(pending, timeout=0.05, return_when=FIRST_COMPLETED)
                    for fut in done:
                        r, c = futures[fut]
                        results[r][c] = fut.result()
                _check_cancelled()
            except BaseException:
                for fut in pending:
                    fut.cancel()
                raise
        return results

    # --- Pipeline completo ---

    def extract_table(
        self,
        image: Image.Image,
        grid: GridModel,
        cancel_event: Optional[threading.Event] = None,
    ) -> Table:
        cells = partition(grid)
        rows, cols = len(cells), len(cells[0])
        log.info("Extrayendo %d celdas (%d filas x %d columnas) con %s.", rows * cols, rows, cols, self.engine.name)
        per_cell = self.recognize_cells(image, cells, cancel_event=cancel_event)
        return assign_and_merge(
            cells,
            per_cell,
            preserve_multiline=self.config.preserve_multiline_formatting,
            observer=self.observer,
        )

    def extract(
        self,
        image: Image.Image,
        grid: Optional[GridModel] = None,
        *,
        fmt=None,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """
        Devuelve la tabla serializada. Sin `grid` se infiere una rejilla desde
        el OCR de la imagen completa; si ese OCR no encuentra nada y la
        rejilla queda vacía, se lanza NoTextRecognized.
        """
        if grid is None:
            fragments = self.recognize_full_image(image)
            if not fragments:
                raise NoTextRecognized("No se reconoció texto en la imagen y no hay líneas de rejilla.")
            grid = infer_initial_grid(fragments)

        table = self.extract_table(image, grid, cancel_event=cancel_event)
        return serialize(
            table,
            fmt or self.config.output_format,
            preserve_multiline=self.config.preserve_multiline_formatting,
        )
