from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image

from .assign import CellObservation
from .errors import ImageCropFailure
from .imaging import crop_cell

log = logging.getLogger(__name__)


class LoggingCellObserver:
    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.DEBUG) -> None:
        self.logger = logger or log
        self.level = level

    def __call__(self, obs: CellObservation) -> None:
        r = obs.cell.rect
        self.logger.log(
            self.level,
            "Celda [%d][%d] x=%.3f y=%.3f w=%.3f h=%.3f fragmentos=%d texto=%r",
            obs.cell.row, obs.cell.col, r.x, r.y, r.width, r.height, len(obs.fragments), obs.text,
        )


class DirectoryCellObserver:
    """
    Guarda, por celda, el texto extraído, sus dimensiones y (si se pasó la
    imagen de origen) el recorte, en `output_dir/NN_row_NN_col/`.
    El directorio es propiedad del llamador.
    """

    def __init__(self, output_dir: str, image: Optional[Image.Image] = None) -> None:
        self.output_dir = Path(output_dir)
        self.image = image

    def cell_dir(self, row: int, col: int) -> Path:
        return self.output_dir / f"{row:02d}_row_{col:02d}_col"

    def __call__(self, obs: CellObservation) -> None:
        cell_dir = self.cell_dir(obs.cell.row, obs.cell.col)
        cell_dir.mkdir(parents=True, exist_ok=True)
        (cell_dir / "text.txt").write_text(obs.text, encoding="utf-8")

        r = obs.cell.rect
        lines = [
            f"Cell Position: Row {obs.cell.row}, Column {obs.cell.col}",
            "",
            "Normalized Bounds (0.0-1.0):",
            f"  Origin: (x: {r.x}, y: {r.y})",
            f"  Size: (width: {r.width}, height: {r.height})",
            "",
            f"Fragments: {len(obs.fragments)}",
            f"Extracted Text: {obs.text!r}",
        ]

        if self.image is not None:
            try:
                crop = crop_cell(self.image, r)
            except ImageCropFailure as exc:
                lines.append(f"Crop: {exc}")
            else:
                crop.save(cell_dir / "cell.png")
                lines.append(f"Crop Size: {crop.width}x{crop.height}px")

        (cell_dir / "dimensions.txt").write_text("\n".join(lines) + "\n", encoding="utf-8")
