from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from PIL import Image, ImageEnhance, ImageOps

from .errors import ImageCropFailure
from .structures import NormalizedRect, to_pixel_box

log = logging.getLogger(__name__)


def load_image(image_path: str) -> Image.Image:
    return Image.open(str(image_path)).convert("RGB")


def crop_cell(image: Image.Image, rect: NormalizedRect) -> Image.Image:
    """Recorta la celda `rect` (normalizada, origen abajo) de `image` (origen arriba)."""
    width, height = image.size
    left, top, right, bottom = to_pixel_box(rect, width, height)
    if left < 0 or top < 0 or right > width or bottom > height:
        raise ImageCropFailure(
            f"Caja ({left}, {top}, {right}, {bottom}) fuera de la imagen {width}x{height}"
        )
    if right <= left or bottom <= top:
        raise ImageCropFailure(f"Caja vacía ({left}, {top}, {right}, {bottom})")
    return image.crop((left, top, right, bottom))


def upscale_to_min_height(image: Image.Image, min_height: int = 1200) -> Image.Image:
    """Escala al menos x2 (o hasta `min_height`) si la imagen es más baja."""
    if image.height >= min_height:
        return image
    factor = max(2.0, min_height / float(image.height))
    size = (int(image.width * factor), int(image.height * factor))
    log.debug("Escalando %dx%d → %dx%d", image.width, image.height, *size)
    return image.resize(size, Image.Resampling.LANCZOS)


def to_grayscale(image: Image.Image) -> Image.Image:
    return ImageOps.grayscale(image)


def enhance_contrast(image: Image.Image, contrast: float = 1.3, brightness: float = 1.05) -> Image.Image:
    image = ImageEnhance.Contrast(image).enhance(contrast)
    return ImageEnhance.Brightness(image).enhance(brightness)


def otsu_threshold(gray: np.ndarray) -> int:
    hist = np.bincount(gray.ravel(), minlength=256).astype(float)
    total = hist.sum()
    if total == 0:
        return 127
    levels = np.arange(256, dtype=float)
    weight_bg = np.cumsum(hist)
    weight_fg = total - weight_bg
    cum_mean = np.cumsum(hist * levels)
    mean_total = cum_mean[-1]
    with np.errstate(divide="ignore", invalid="ignore"):
        mean_bg = cum_mean / weight_bg
        mean_fg = (mean_total - cum_mean) / weight_fg
        between = weight_bg * weight_fg * (mean_bg - mean_fg) ** 2
    between = np.nan_to_num(between)
    return int(np.argmax(between))


def binarize(image: Image.Image, threshold: Optional[int] = None) -> Image.Image:
    """Blanco y negro puro; sin umbral explícito se usa Otsu."""
    gray = np.asarray(to_grayscale(image), dtype=np.uint8)
    t = otsu_threshold(gray) if threshold is None else threshold
    out = np.where(gray > t, 255, 0).astype(np.uint8)
    return Image.fromarray(out)


def preprocess_for_ocr(image: Image.Image, min_height: int = 40) -> Image.Image:
    image = upscale_to_min_height(image, min_height=min_height)
    image = to_grayscale(image)
    image = enhance_contrast(image)
    return binarize(image)
