# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/core/__init__.py
from .exceptions import Fatal, NmConfiguratorError
from .logger import Log, get_logger
from .utils import U

__all__ = ["Fatal", "NmConfiguratorError", "Log", "get_logger", "U"]
