from __future__ import annotations


class TableCaptureError(Exception):
    """Base de todos los errores del extractor de tablas."""


class NoTextRecognized(TableCaptureError):
    """El OCR no devolvió ningún fragmento y no hay rejilla que particionar."""


class DegenerateGrid(TableCaptureError, ValueError):
    """Líneas de rejilla fuera de (0, 1); se rechazan antes de particionar."""


class ImageCropFailure(TableCaptureError):
    """La caja en píxeles de una celda está vacía o fuera de la imagen."""


class OcrEngineError(TableCaptureError, RuntimeError):
    """Falló la llamada al motor de OCR."""


class ExtractionCancelled(TableCaptureError):
    """La extracción se canceló antes de completar todas las celdas."""
