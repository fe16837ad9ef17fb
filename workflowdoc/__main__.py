"""
Entry point for running workflowdoc as a module.

Usage:
    python -m workflowdoc [options]
"""

import sys

from workflowdoc.cli import main

if __name__ == "__main__":
    sys.exit(main())
