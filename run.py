# run.py
from __future__ import annotations
import sys
from pathlib import Path
import logging
import argparse

sys.path.append(str(Path(__file__).parent / "src"))
from importlib import import_module
tc_main = import_module("table_capture.main")
tc_config = import_module("table_capture.config")
tc_errors = import_module("table_capture.errors")

log = logging.getLogger(__name__)

def main() -> None:
    parser = argparse.ArgumentParser(description="Extraer una tabla de una imagen (o de su hOCR) a CSV o Markdown.")
    parser.add_argument("output_path", type=str, nargs="?", help="Ruta de salida (.csv / .md). Si se omite, se imprime por stdout.")
    parser.add_argument("--image", type=str, help="Imagen de entrada (OCR por celda)")
    parser.add_argument("--hocr_path", type=str, help="hOCR de la imagen completa (sin re-OCR por celda)")
    parser.add_argument("--format", type=str, default="csv", choices=["csv", "markdown"],
                        help="Formato de salida (default: csv)")
    parser.add_argument("--vertical", type=float, nargs="*", metavar="X",
                        help="Posiciones normalizadas (0-1) de las líneas verticales")
    parser.add_argument("--horizontal", type=float, nargs="*", metavar="Y",
                        help="Posiciones normalizadas (0-1) de las líneas horizontales, medidas desde abajo")
    parser.add_argument("--multiline", action="store_true",
                        help="Conservar saltos de línea dentro de cada celda")
    parser.add_argument("--engine", type=str, default="lines", choices=["lines", "words"],
                        help="Motor OCR por celda (default: lines)")
    parser.add_argument("--fallback-engine", type=str, default="words", choices=["lines", "words", "none"],
                        help="Motor alternativo si el principal no reconoce nada (default: words)")
    parser.add_argument("--ocr-lang", type=str, default="eng", help="Idioma OCR para Tesseract")
    parser.add_argument("--psm", type=int, default=6, help="Page segmentation mode de Tesseract")
    parser.add_argument("--workers", type=int, default=1, help="Hilos para el OCR por celda")
    parser.add_argument("--preprocess", action="store_true",
                        help="Escalar, pasar a grises y binarizar cada celda antes del OCR")
    parser.add_argument("--debug-dir", type=str, help="Directorio donde guardar recortes y texto por celda")
    parser.add_argument("--save", action="store_true",
                        help="Sin output_path, guardar junto a la entrada (.csv / .md) en vez de imprimir")
    parser.add_argument("--loglevel", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Nivel de verbosidad del log (default: INFO)")

    args = parser.parse_args()

    if bool(args.image) == bool(args.hocr_path):
        parser.error("Indique exactamente uno de --image o --hocr_path")

    logging.basicConfig(level=args.loglevel, format='%(asctime)s - %(levelname)s - %(message)s')

    config = tc_config.ExtractionConfig(
        output_format=args.format,
        preserve_multiline_formatting=args.multiline,
        max_workers=args.workers,
        engine=args.engine,
        fallback_engine=None if args.fallback_engine == "none" else args.fallback_engine,
        ocr_lang=args.ocr_lang,
        ocr_psm=args.psm,
        preprocess=args.preprocess,
    )

    if args.save and not args.output_path:
        args.output_path = tc_main.default_output_path(args.image or args.hocr_path, config)

    try:
        if args.image:
            log.info(f"IMAGEN: {args.image}")
            text = tc_main.image_to_table(
                args.image,
                args.output_path,
                vertical_lines=args.vertical,
                horizontal_lines=args.horizontal,
                config=config,
                debug_dir=args.debug_dir,
            )
        else:
            log.info(f"HOCR: {args.hocr_path}")
            text = tc_main.hocr_to_table(
                args.hocr_path,
                args.output_path,
                vertical_lines=args.vertical,
                horizontal_lines=args.horizontal,
                config=config,
            )
        if not args.output_path:
            print(text)
        log.info("✔ Proceso completado.")
    except FileNotFoundError:
        log.error(f"Error: No se encontró el archivo de entrada: {args.image or args.hocr_path}")
        sys.exit(1)
    except tc_errors.NoTextRecognized as e:
        log.error(f"No se reconoció texto: {e}")
        sys.exit(2)
    except Exception as e:
        log.error(f"Ocurrió un error inesperado: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    main()
