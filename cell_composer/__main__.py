"""Package entry point for ``python -m cell_composer``.

Delegates to the CLI's main() and exits with its return code.
"""

import sys

from cell_composer.cli import main

if __name__ == "__main__":
    sys.exit(main())
