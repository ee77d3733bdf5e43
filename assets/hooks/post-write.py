#!/usr/bin/env python3
"""Post-write hook: formats the written file. Always exits 0.

`ccsetup install` rewrites the shebang to the interpreter ccsetup runs under.
"""

import sys

try:
    from ccsetup.hooks.formatter import main
except ImportError:
    sys.exit(0)

sys.exit(main())
