#!/usr/bin/env python3
"""Pre-bash hook: blocks dangerous shell commands (exit 2).

`ccsetup install` rewrites the shebang to the interpreter ccsetup runs under.
"""

import sys

try:
    from ccsetup.hooks.guard import main
except ImportError as e:
    print(f"ccsetup guard error: {e} (reinstall with `ccsetup install`)", file=sys.stderr)
    sys.exit(1)

sys.exit(main())
