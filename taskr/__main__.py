"""Allow ``python -m taskr``."""

import sys

from taskr.main import main

sys.exit(main())
