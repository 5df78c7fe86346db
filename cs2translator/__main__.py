"""Allow `python -m cs2translator`."""

import sys

from cs2translator.main import main

sys.exit(main())
