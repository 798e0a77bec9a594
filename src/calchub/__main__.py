"""Entry point for ``python -m calchub``."""

import sys

from calchub.cli import main

sys.exit(main())
