import pytest

from companion.preprocess import pipeline
from companion.preprocess.pipeline import Preprocessor
from companion.preprocess.tables import default_tables


@pytest.fixture(scope="session")
def tables():
    return default_tables()


@pytest.fixture(scope="session")
def preprocessor(tables):
    return Preprocessor(tables)


@pytest.fixture
def reset_default_preprocessor():
    """Drop the module-level preprocessor before and after a test."""
    pipeline.set_preprocessor(None)
    yield
    pipeline.set_preprocessor(None)
