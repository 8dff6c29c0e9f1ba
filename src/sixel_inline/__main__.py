# =============================================================================
# sixel-inline Entry Point for `python -m sixel_inline`
# =============================================================================
# This module allows sixel-inline to be run as a Python module:
#
#   python -m sixel_inline README.md --attachments images/ --image
#
# This is equivalent to running the 'sixel-inline' command after installation.
# =============================================================================

import sys

from sixel_inline.cli import main

if __name__ == "__main__":
    sys.exit(main())
