"""Allow running svbisect with ``python -m svbisect``."""

import sys

from svbisect.cli import main


sys.exit(main())
