# src/table_capture/parser.py
from __future__ import annotations
from typing import List, Optional, Tuple
from bs4 import BeautifulSoup
from .structures import TextFragment, from_pixel_box, parse_bbox

LINE_CLASSES = ("ocr_line", "ocr_caption", "ocr_header", "ocr_textfloat")


def _load_soup(text: str) -> BeautifulSoup:
    """
    Intenta XML (lxml-xml) y, si no hay nodos HOCR, fallback a HTML (lxml).
    """
    soup_xml = BeautifulSoup(text, "lxml-xml")
    if soup_xml.find(class_=lambda c: c and "ocr_page" in c):
        return soup_xml
    return BeautifulSoup(text, "lxml")


def _has_class(*names: str):
    return lambda c: bool(c) and any(n in c.split() for n in names)


def _node_text(node, level: str) -> str:
    if level == "word":
        return (node.get_text() or "").strip()
    words = node.find_all(class_=_has_class("ocrx_word"))
    if words:
        return " ".join(w.get_text().strip() for w in words if w.get_text().strip())
    return " ".join((node.get_text() or "").split())


def parse_hocr_fragments(raw: str,
                         *,
                         level: str = "line",
                         page_index: int = 0,
                         page_size: Optional[Tuple[int, int]] = None,
                         ) -> List[TextFragment]:
    """
    Convierte un documento hOCR en fragmentos con cajas normalizadas
    (origen abajo-izquierda).

    `level` = "line" agrupa por `ocr_line` (y equivalentes); "word" devuelve
    cada `ocrx_word`. El tamaño de página sale del bbox de `ocr_page`
    salvo que se indique `page_size` (ancho, alto).
    """
    if level not in ("line", "word"):
        raise ValueError(f"Nivel hOCR desconocido: {level!r}")

    soup = _load_soup(raw)
    pages = soup.find_all(class_=_has_class("ocr_page"))
    if not pages or page_index >= len(pages):
        return []
    page = pages[page_index]

    if page_size is not None:
        width, height = page_size
    else:
        pb = parse_bbox(page.get("title", ""))
        if not pb:
            raise ValueError("La página hOCR no tiene bbox; indique page_size.")
        width, height = pb[2] - pb[0], pb[3] - pb[1]

    classes = ("ocrx_word",) if level == "word" else LINE_CLASSES
    fragments: List[TextFragment] = []
    for node in page.find_all(class_=_has_class(*classes)):
        bb = parse_bbox(node.get("title", ""))
        if not bb:
            continue
        text = _node_text(node, level)
        if not text:
            continue
        x1, y1, x2, y2 = bb
        fragments.append(TextFragment(text=text, box=from_pixel_box(x1, y1, x2, y2, width, height)))

    return fragments


def parse_hocr_file(hocr_path: str, **kwargs) -> List[TextFragment]:
    with open(hocr_path, "r", encoding="utf-8") as f:
        raw = f.read()
    return parse_hocr_fragments(raw, **kwargs)
