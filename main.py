"""
CLI entrypoint for the prompt domain classification engine.

Two modes:
- `--prompt TEXT [--issues a,b]`: classify one prompt, select templates and
  print the decision as JSON.
- default: load configs/experiment.yaml, classify every prompt of the
  dataset, save predictions and metrics, and log a summary.
"""

import argparse
import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from application import (
    attach_and_serialize_predictions,
    build_engine,
    build_lint_result,
    decide,
    detect_columns,
    log_evaluation_summary,
    parse_issues,
    run_classification,
    run_evaluation_if_labels_available,
)
from application.constants import (
    CONFIG_SNAPSHOT_FILENAME,
    DATA_FINGERPRINT_FILENAME,
    DOMAIN_ACCURACY_FILENAME,
    LOG_FILENAME,
    METRICS_FILENAME,
    OUTPUT_ROOT,
    PRED_CONFIDENCE_COL,
    PRED_DOMAIN_COL,
    PREDICTIONS_FILENAME,
)
from domain.evaluation import compute_domain_accuracy_table_and_save
from infrastructure.config import load_classifier_tables, load_run_config, load_selection_tables
from infrastructure.constants import EXPERIMENT_FILE
from infrastructure.io import read_table, require_file, write_json
from infrastructure.observability import configure_logging, get_log_context, make_run_tag, set_log_context

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Classify prompts by domain and select rewriting templates")
    p.add_argument(
        "--experiment",
        type=str,
        default=str(EXPERIMENT_FILE),
        help="Path to experiment.yaml (default: configs/experiment.yaml)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file, loaded if present (default: .env)",
    )
    p.add_argument(
        "--prompt",
        type=str,
        default=None,
        help="Classify this single prompt instead of running the dataset evaluation.",
    )
    p.add_argument(
        "--issues",
        type=str,
        default="",
        help="Comma-separated lint rule types for --prompt (e.g. missing_language,vague_wording).",
    )
    p.add_argument(
        "--console-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level",
    )
    p.add_argument(
        "--file-level",
        type=str,
        default="DEBUG",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="File log level",
    )
    return p.parse_args()


def classify_single_prompt(prompt: str, issues: str) -> None:
    """Print the decision for one prompt as JSON on stdout."""
    classifier, selector = asyncio.run(build_engine(load_classifier_tables(), load_selection_tables()))
    issue_types = parse_issues(issues.replace(",", ";"))
    decision = decide(prompt, build_lint_result(prompt, issue_types), classifier, selector)
    print(json.dumps(decision.model_dump(mode="json"), ensure_ascii=False, indent=2))


def run_experiment(experiment_path: Path, console_level: str, file_level: str) -> None:
    cfg = load_run_config(require_file(experiment_path, "experiment.yaml"))

    # ---- Per-run output folder ----
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_id = f"{ts}_{cfg.name}_min{cfg.classifier.min_confidence}_tpl{int(cfg.select_templates)}"
    run_dir = OUTPUT_ROOT / run_id
    run_dir.mkdir(parents=True, exist_ok=True)

    log_path = run_dir / LOG_FILENAME
    configure_logging(
        log_file=log_path,
        console_level=getattr(logging, console_level),
        file_level=getattr(logging, file_level),
    )
    set_log_context(run_id_full=run_id)

    logger.info("Starting run: run_id=%s (run_tag=%s)", run_id, make_run_tag(run_id))
    logger.info("Run output directory: %s", run_dir)

    classifier_tables = load_classifier_tables(cfg.classifier_file)
    selection_tables = load_selection_tables(cfg.templates_file)
    classifier, selector = asyncio.run(build_engine(classifier_tables, selection_tables, cfg.classifier))

    logger.info("Loading test data from %s...", cfg.test_file_path)
    text_columns = [c for c in (cfg.columns.prompt_col, cfg.columns.issues_col) if c]
    test_df = read_table(cfg.test_file_path, text_columns=text_columns)
    logger.info("Test data loaded: %d rows, %d columns", test_df.shape[0], test_df.shape[1])

    columns = detect_columns(cfg, test_df)

    # Snapshot config + data fingerprint
    write_json(
        {**cfg.model_dump(mode="json"), "tables": get_log_context()["tables_version"]},
        run_dir / CONFIG_SNAPSHOT_FILENAME,
    )
    write_json(
        {
            "test_file": str(cfg.test_file_path),
            "test_rows": int(test_df.shape[0]),
            "test_columns": list(test_df.columns),
        },
        run_dir / DATA_FINGERPRINT_FILENAME,
    )

    decisions = run_classification(
        test_df=test_df,
        columns=columns,
        classifier=classifier,
        selector=selector if cfg.select_templates else None,
    )

    test_df_out, predictions_path = attach_and_serialize_predictions(
        test_df=test_df,
        columns=columns,
        decisions=decisions,
        predictions_path=run_dir / PREDICTIONS_FILENAME,
    )

    metrics, cm_df = run_evaluation_if_labels_available(cfg=cfg, test_df_out=test_df_out, columns=columns)
    metrics_path = write_json(metrics, run_dir / METRICS_FILENAME)
    logger.info("Saved metrics to %s", metrics_path)

    accuracy_table_path = None
    if columns.expected_domain is not None:
        accuracy_table_path = compute_domain_accuracy_table_and_save(
            df=test_df_out,
            output_dir=run_dir,
            expected_col=columns.expected_domain,
            predicted_col=PRED_DOMAIN_COL,
            confidence_col=PRED_CONFIDENCE_COL,
            labels_order=cfg.stats.labels_order,
            filename=DOMAIN_ACCURACY_FILENAME,
            min_confidence_col=columns.min_confidence,
        )
        logger.info("Saved per-domain accuracy table to %s", accuracy_table_path)

    log_evaluation_summary(
        metrics=metrics,
        cm_df=cm_df,
        predictions_path=predictions_path,
        metrics_path=metrics_path,
        accuracy_table_path=accuracy_table_path,
    )

    logger.info("Detailed log: %s", log_path)


def main() -> None:
    args = _parse_args()

    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)

    if args.prompt is not None:
        configure_logging(console_level=logging.WARNING)
        classify_single_prompt(args.prompt, args.issues)
        return

    run_experiment(Path(args.experiment), args.console_level, args.file_level)


if __name__ == "__main__":
    main()
