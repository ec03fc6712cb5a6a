from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

import numpy as np
import pandas as pd


@dataclass
class TableEvaluation:
    text_accuracy: float
    mean_similarity: float
    total_cells: int
    matched_cells: int

    def to_dict(self) -> Dict[str, object]:
        return dict(self.__dict__)


def levenshtein_distance(a: str, b: str) -> int:
    if not a:
        return len(b)
    if not b:
        return len(a)
    prev = np.arange(len(b) + 1)
    for i, ca in enumerate(a, start=1):
        cur = np.empty_like(prev)
        cur[0] = i
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            cur[j] = min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost)
        prev = cur
    return int(prev[-1])


def string_similarity(a: str, b: str) -> float:
    """1.0 = idénticos, 0.0 = completamente distintos."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / longest


def fuzzy_compare(actual: str, expected: str, similarity_threshold: float = 0.98) -> bool:
    """Tolera errores menores de OCR (p. ej. 'Elephabnt' por 'Elephant')."""
    if actual == expected:
        return True
    return string_similarity(actual, expected) >= similarity_threshold


def read_table_csv(text: str) -> pd.DataFrame:
    if not text.strip():
        return pd.DataFrame()
    df = pd.read_csv(io.StringIO(text), header=None, dtype=str, keep_default_na=False)
    # filas cortas dejan NaN aunque keep_default_na=False
    return df.map(lambda x: "" if pd.isna(x) else str(x).strip())


def _read_csv_file(path: str) -> pd.DataFrame:
    with open(path, "r", encoding="utf-8-sig") as fh:
        return read_table_csv(fh.read())


def _pad_frame(df: pd.DataFrame, n_rows: int, n_cols: int) -> np.ndarray:
    out = np.full((n_rows, n_cols), "", dtype=object)
    if df.size:
        out[: df.shape[0], : df.shape[1]] = df.to_numpy(dtype=object)
    return out


def compare_frames(df_ref: pd.DataFrame, df_pred: pd.DataFrame) -> TableEvaluation:
    n_rows = max(df_ref.shape[0], df_pred.shape[0])
    n_cols = max(df_ref.shape[1], df_pred.shape[1])
    ref = _pad_frame(df_ref, n_rows, n_cols)
    pred = _pad_frame(df_pred, n_rows, n_cols)

    total_cells = int(n_rows * n_cols)
    if not total_cells:
        return TableEvaluation(text_accuracy=0.0, mean_similarity=0.0, total_cells=0, matched_cells=0)

    matches = int((ref == pred).sum())
    sims = [string_similarity(str(a), str(b)) for a, b in zip(ref.ravel(), pred.ravel())]
    return TableEvaluation(
        text_accuracy=matches / total_cells,
        mean_similarity=float(np.mean(sims)),
        total_cells=total_cells,
        matched_cells=matches,
    )


def evaluate_tables(reference_csv: str, predicted_csv: str) -> TableEvaluation:
    return compare_frames(_read_csv_file(reference_csv), _read_csv_file(predicted_csv))


def write_report(evaluation: TableEvaluation, output_path: str) -> None:
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(["Metric", "Value", "N"])
        writer.writerow(["text_accuracy", f"{evaluation.text_accuracy:.4f}", evaluation.total_cells])
        writer.writerow(["mean_similarity", f"{evaluation.mean_similarity:.4f}", evaluation.total_cells])
        writer.writerow(["matched_cells", evaluation.matched_cells, evaluation.total_cells])
