from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from .assign import assign_and_merge, assign_by_containment
from .cells import partition
from .config import ExtractionConfig
from .errors import NoTextRecognized
from .exporters import serialize, write_table
from .extractor import TableExtractor
from .grid import GridModel
from .grid_inference import infer_initial_grid
from .imaging import load_image
from .ocr_engines import OcrEngine, engine_from_config
from .observers import DirectoryCellObserver
from .parser import parse_hocr_file

log = logging.getLogger(__name__)


def _build_grid(vertical_lines: Optional[Sequence[float]],
                horizontal_lines: Optional[Sequence[float]]) -> Optional[GridModel]:
    if vertical_lines is None and horizontal_lines is None:
        return None
    return GridModel(vertical_lines=list(vertical_lines or []),
                     horizontal_lines=list(horizontal_lines or []))


def image_to_table(
    image_path: str,
    output_path: Optional[str] = None,
    *,
    vertical_lines: Optional[Sequence[float]] = None,
    horizontal_lines: Optional[Sequence[float]] = None,
    config: Optional[ExtractionConfig] = None,
    engine: Optional[OcrEngine] = None,
    debug_dir: Optional[str] = None,
) -> str:
    """
    Extrae la tabla de una imagen con OCR por celda.

    Si no se pasan líneas, la rejilla se infiere del OCR de la imagen
    completa. Devuelve el texto serializado y, si se indica `output_path`,
    además lo escribe en disco.
    """
    config = config or ExtractionConfig()
    log.info("Cargando imagen: %s", image_path)
    image = load_image(image_path)

    engine = engine or engine_from_config(config)
    observer = DirectoryCellObserver(debug_dir, image=image) if debug_dir else None
    extractor = TableExtractor(engine, config, observer=observer)

    grid = _build_grid(vertical_lines, horizontal_lines)
    if grid is None:
        log.info("Sin líneas explícitas: infiriendo rejilla inicial.")
    else:
        log.info("Rejilla explícita: %d verticales, %d horizontales.",
                 len(grid.vertical_lines), len(grid.horizontal_lines))

    text = extractor.extract(image, grid)

    if output_path:
        write_table(text, output_path, config.output_format)
        log.info("Tabla escrita en: %s", output_path)
    return text


def hocr_to_table(
    hocr_path: str,
    output_path: Optional[str] = None,
    *,
    vertical_lines: Optional[Sequence[float]] = None,
    horizontal_lines: Optional[Sequence[float]] = None,
    config: Optional[ExtractionConfig] = None,
) -> str:
    """
    Variante sin imagen: usa un hOCR ya generado de la imagen completa y
    reparte cada línea en la celda que contiene su centro.
    """
    config = config or ExtractionConfig()
    log.info("Parseando HOCR desde: %s", hocr_path)
    fragments = parse_hocr_file(hocr_path, level="line")

    grid = _build_grid(vertical_lines, horizontal_lines)
    if grid is None:
        if not fragments:
            raise NoTextRecognized(f"El HOCR {hocr_path} no contiene texto y no hay líneas de rejilla.")
        grid = infer_initial_grid(fragments)
    elif not fragments:
        log.warning("No se encontraron fragmentos en el HOCR; la tabla quedará vacía.")

    cells = partition(grid)
    table = assign_and_merge(
        cells,
        assign_by_containment(cells, fragments),
        preserve_multiline=config.preserve_multiline_formatting,
    )
    text = serialize(table, config.output_format,
                     preserve_multiline=config.preserve_multiline_formatting)

    if output_path:
        write_table(text, output_path, config.output_format)
        log.info("Tabla escrita en: %s", output_path)
    return text


def default_output_path(input_path: str, config: ExtractionConfig) -> str:
    suffix = ".md" if config.output_format.value == "markdown" else ".csv"
    return str(Path(input_path).with_suffix(suffix))
