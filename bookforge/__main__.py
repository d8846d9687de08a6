"""Allow ``python -m bookforge``."""

import sys

from bookforge.infrastructure.cli.app import main

sys.exit(main())
