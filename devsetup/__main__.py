"""Allow ``python -m devsetup``."""

import sys

from devsetup.main import main

sys.exit(main())
