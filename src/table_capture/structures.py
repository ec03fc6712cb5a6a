from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
import re

BBOX_RE = re.compile(r"bbox (\d+)\s+(\d+)\s+(\d+)\s+(\d+)")

def parse_bbox(title_attr: str) -> Optional[Tuple[int, int, int, int]]:
    if not title_attr:
        return None
    m = BBOX_RE.search(title_attr)
    if not m:
        return None
    x1, y1, x2, y2 = map(int, m.groups())
    return x1, y1, x2, y2


@dataclass(frozen=True)
class NormalizedRect:
    """Rectángulo en coordenadas normalizadas [0, 1].

    El origen (x=0, y=0) es la esquina INFERIOR izquierda de la imagen,
    igual que los bounding boxes que entrega el OCR.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2.0

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.max_x and self.y <= py <= self.max_y


@dataclass(frozen=True)
class TextFragment:
    """Un resultado de OCR: texto + caja normalizada."""
    text: str
    box: NormalizedRect


@dataclass(frozen=True)
class Cell:
    row: int
    col: int
    rect: NormalizedRect


class Axis(str, Enum):
    VERTICAL = "vertical"      # separador de columnas
    HORIZONTAL = "horizontal"  # separador de filas


@dataclass(frozen=True)
class GridSelection:
    axis: Axis
    index: int

    def __post_init__(self) -> None:
        # acepta "vertical"/"horizontal"; un eje inválido falla aquí y no al mutar la rejilla
        object.__setattr__(self, "axis", Axis(self.axis))


def to_pixel_box(rect: NormalizedRect, width_px: int, height_px: int) -> Tuple[int, int, int, int]:
    """Convierte un rectángulo normalizado (origen abajo-izquierda) a una caja
    de píxeles (left, top, right, bottom) con origen arriba-izquierda.

    Cada borde se redondea por separado, así dos celdas contiguas comparten
    exactamente el mismo borde en píxeles.
    """
    left = int(round(rect.x * width_px))
    right = int(round(rect.max_x * width_px))
    top = int(round((1.0 - rect.y - rect.height) * height_px))
    bottom = int(round((1.0 - rect.y) * height_px))
    return left, top, right, bottom


def from_pixel_box(x1: float, y1: float, x2: float, y2: float,
                   width_px: float, height_px: float) -> NormalizedRect:
    """Inversa de `to_pixel_box`: caja en píxeles (origen arriba) → normalizada."""
    if width_px <= 0 or height_px <= 0:
        raise ValueError(f"Dimensiones de imagen inválidas: {width_px}x{height_px}")
    return NormalizedRect(
        x=x1 / width_px,
        y=1.0 - (y2 / height_px),
        width=(x2 - x1) / width_px,
        height=(y2 - y1) / height_px,
    )
