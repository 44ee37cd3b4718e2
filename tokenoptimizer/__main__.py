# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/__main__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Allow ``python -m tokenoptimizer``.
"""

# First-Party
from tokenoptimizer.cli import run

if __name__ == "__main__":
    run()
