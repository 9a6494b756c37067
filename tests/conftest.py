"""Shared pytest fixtures and configuration for all tests."""

import os

import pytest

from ourodocs.core.registry import create_default_registry
from ourodocs.languages.ouroboros import GRAMMAR

# Qt widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def registry():
    """A registry with the bundled languages."""
    return create_default_registry()


@pytest.fixture
def grammar():
    """The Ouroboros grammar."""
    return GRAMMAR


@pytest.fixture(scope="session")
def qapp():
    """The QApplication shared by widget tests."""
    widgets = pytest.importorskip("PyQt6.QtWidgets")
    app = widgets.QApplication.instance() or widgets.QApplication([])
    yield app
