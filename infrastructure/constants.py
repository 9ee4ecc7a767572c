from pathlib import Path

# Repo-root conventional directories/files (overrideable via experiment.yaml)
REPO_ROOT = Path(__file__).resolve().parent.parent
CONFIG_DIR = REPO_ROOT / "configs"
CLASSIFIER_FILE = CONFIG_DIR / "classifier.yaml"
TEMPLATES_FILE = CONFIG_DIR / "templates.yaml"
EXPERIMENT_FILE = CONFIG_DIR / "experiment.yaml"

DATA_DIR = REPO_ROOT / "dataset"

# Environment overrides for the table files
CLASSIFIER_FILE_ENV = "PROMPTLINT_CLASSIFIER_FILE"
TEMPLATES_FILE_ENV = "PROMPTLINT_TEMPLATES_FILE"
