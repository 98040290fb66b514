# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/modes/__init__.py
from .apply_mode import ApplyMode
from .generate_mode import GenerateMode

__all__ = ["ApplyMode", "GenerateMode"]
