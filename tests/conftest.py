# SPDX-License-Identifier: LGPL-3.0-or-later
import logging
import os
import sys
from pathlib import Path

import pytest

_THIS_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _THIS_DIR.parent

if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
if str(_THIS_DIR) not in sys.path:
    sys.path.insert(0, str(_THIS_DIR))

os.environ.setdefault("PYTHONPATH", str(_REPO_ROOT))


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: fast tests without external tools")
    config.addinivalue_line("markers", "integration: generate/apply flows through the CLI entry point")
    config.addinivalue_line("markers", "security: file permission and input sanitization checks")


@pytest.fixture(autouse=True)
def _reset_project_logger():
    """Log.setup() detaches the project logger from root; undo it so caplog keeps working."""
    yield
    logger = logging.getLogger("nmconfigurator")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def logger():
    lg = logging.getLogger("tests.nmconfigurator")
    lg.setLevel(logging.DEBUG)
    return lg
