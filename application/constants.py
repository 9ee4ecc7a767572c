"""Application-level constants."""

from pathlib import Path

# Keys for serialization
ORIGINAL_INDEX_KEY = "og_index"
PROMPT_KEY = "prompt"
EXPECTED_DOMAIN_KEY = "expected_domain"
MIN_CONFIDENCE_KEY = "min_confidence"
ISSUES_KEY = "issues"

# Column names for predictions
PRED_DOMAIN_COL = "Pred_Domain"
PRED_CONFIDENCE_COL = "Pred_Confidence"
PRED_INDICATORS_COL = "Pred_Indicators"
PRED_TEMPLATES_COL = "Pred_Templates"
PRED_TIME_COL = "Pred_Processing_ms"

# Separator of the issues cell ("missing_language;vague_wording")
ISSUES_SEPARATOR = ";"

# Output filenames
PREDICTIONS_FILENAME = "test_predictions.json"
METRICS_FILENAME = "metrics.json"
DOMAIN_ACCURACY_FILENAME = "domain_accuracy_table.csv"
CONFIG_SNAPSHOT_FILENAME = "config.resolved.json"
DATA_FINGERPRINT_FILENAME = "data_fingerprint.json"

# Output directory structure
OUTPUT_ROOT = Path("outputs")
LOG_FILENAME = "run.log"
