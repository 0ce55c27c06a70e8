"""Allow ``python -m nexus_init``."""

from __future__ import annotations

import sys

from nexus_init.cli import main

sys.exit(main())
