import asyncio

import pytest

from domain.classification import HybridClassifier
from domain.selection import TemplateSelector
from infrastructure.config import load_classifier_tables, load_selection_tables
from infrastructure.constants import CLASSIFIER_FILE, TEMPLATES_FILE


@pytest.fixture(scope="session")
def classifier_tables():
    return load_classifier_tables(CLASSIFIER_FILE)


@pytest.fixture(scope="session")
def selection_tables():
    return load_selection_tables(TEMPLATES_FILE)


@pytest.fixture(scope="session")
def hybrid(classifier_tables) -> HybridClassifier:
    classifier = HybridClassifier(classifier_tables)
    asyncio.run(classifier.initialize())
    return classifier


@pytest.fixture
def selector(selection_tables) -> TemplateSelector:
    return TemplateSelector(selection_tables)
