"""duplicacy-wrapper: duplicacy_wrapper/__main__.py.

Run duplicacy backup, copy, prune and check over the configured storages.
"""

import sys

from .cli.dispatcher import main

if __name__ == "__main__":
    sys.exit(main())
