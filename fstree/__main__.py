# fstree/__main__.py

"""Entry point for ``python -m fstree``."""

import sys

from fstree.cli import main

sys.exit(main())
