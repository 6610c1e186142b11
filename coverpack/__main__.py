"""Allow ``python -m coverpack``."""

import sys

from .cli import main

sys.exit(main())
