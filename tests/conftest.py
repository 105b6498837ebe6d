import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from PySide6.QtCore import QCoreApplication

from links_toggler.core.models import ConversionSettings, LinkStyle
from links_toggler.core.resolver import TargetResolver


CORPUS = [
    "Folder/Note.md",
    "Folder/Sub/Current.md",
    "Assets/diagram.png",
    "Assets/manual.pdf",
    "Notes/My Note.md",
    "Other.md",
]


@pytest.fixture
def resolver():
    return TargetResolver.from_documents(CORPUS)


@pytest.fixture
def absolute():
    return ConversionSettings(link_style=LinkStyle.ABSOLUTE)


@pytest.fixture
def relative():
    return ConversionSettings(link_style=LinkStyle.RELATIVE)


@pytest.fixture
def qapp():
    return QCoreApplication.instance() or QCoreApplication([])
