#!/usr/bin/env python3
# /linepick/main.py
"""
linepick launcher for a source checkout.

Makes the `linepick` package under src/ importable without installation and
hands over to `linepick.cli.start`. Installed copies use the `linepick`
console script instead.
"""

import os
import sys

project_src = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if project_src not in sys.path:
    sys.path.insert(0, project_src)

from linepick.cli import start  # noqa: E402


if __name__ == "__main__":
    start()
