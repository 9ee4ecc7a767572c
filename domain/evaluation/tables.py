"""Per-domain accuracy table generation."""

from collections.abc import Sequence
from pathlib import Path

import pandas as pd

TABLE_COLUMNS = [
    "Domain",
    "Total count in dataset",
    "Correct domain (count)",
    "Correct domain (%)",
    "Passed min confidence (count)",
    "Passed min confidence (%)",
    "Mean confidence",
]


def compute_domain_accuracy_table(
    df: pd.DataFrame,
    expected_col: str,
    predicted_col: str,
    confidence_col: str,
    labels_order: Sequence[str],
    min_confidence_col: str | None = None,
) -> pd.DataFrame:
    """
    Build a table of classification accuracy grouped by expected domain.

    Columns in the result:
      - Domain: expected domain
      - Total count in dataset: number of prompts expected in this domain
      - Correct domain (count / %): predicted domain equals the expected one
      - Passed min confidence (count / %): correct AND confidence >= the row's
        minimum (equals the correct count when no minimum column is given)
      - Mean confidence: average predicted confidence for the group

    Rows follow `labels_order`; domains absent from the data are skipped,
    unknown expected values are appended after the known ones.
    """
    for col in [expected_col, predicted_col, confidence_col]:
        if col not in df.columns:
            raise KeyError(f"Required column '{col}' not found in DataFrame.")
    if min_confidence_col is not None and min_confidence_col not in df.columns:
        raise KeyError(f"Required column '{min_confidence_col}' not found in DataFrame.")

    sub_df = df.dropna(subset=[expected_col]).copy()
    sub_df[expected_col] = sub_df[expected_col].astype(str).str.strip().str.lower()
    sub_df[predicted_col] = sub_df[predicted_col].astype(str).str.strip().str.lower()
    sub_df[confidence_col] = pd.to_numeric(sub_df[confidence_col], errors="coerce").fillna(0)

    correct = sub_df[expected_col] == sub_df[predicted_col]
    if min_confidence_col is not None:
        minimum = pd.to_numeric(sub_df[min_confidence_col], errors="coerce").fillna(0)
        passed = correct & (sub_df[confidence_col] >= minimum)
    else:
        passed = correct
    sub_df["_correct"] = correct
    sub_df["_passed"] = passed

    rows: list[dict[str, object]] = []
    for domain, group in sub_df.groupby(expected_col, sort=False):
        total = len(group)
        correct_count = int(group["_correct"].sum())
        passed_count = int(group["_passed"].sum())
        rows.append(
            {
                "Domain": domain,
                "Total count in dataset": total,
                "Correct domain (count)": correct_count,
                "Correct domain (%)": round(correct_count / total * 100.0, 1),
                "Passed min confidence (count)": passed_count,
                "Passed min confidence (%)": round(passed_count / total * 100.0, 1),
                "Mean confidence": round(float(group[confidence_col].mean()), 1),
            }
        )

    if not rows:
        return pd.DataFrame(columns=TABLE_COLUMNS)

    result = pd.DataFrame(rows, columns=TABLE_COLUMNS)
    order = {label: idx for idx, label in enumerate(labels_order)}
    result["_order"] = result["Domain"].map(lambda d: order.get(d, len(order)))
    result = result.sort_values(["_order", "Domain"]).reset_index(drop=True)
    return result.drop(columns=["_order"])


def compute_domain_accuracy_table_and_save(
    df: pd.DataFrame,
    output_dir: Path,
    expected_col: str,
    predicted_col: str,
    confidence_col: str,
    labels_order: Sequence[str],
    filename: str,
    min_confidence_col: str | None = None,
) -> Path:
    """Convenience wrapper: compute the per-domain accuracy table and save it as CSV."""
    table_df = compute_domain_accuracy_table(
        df=df,
        expected_col=expected_col,
        predicted_col=predicted_col,
        confidence_col=confidence_col,
        labels_order=labels_order,
        min_confidence_col=min_confidence_col,
    )
    out_path = output_dir / filename
    table_df.to_csv(out_path, index=False)
    return out_path
