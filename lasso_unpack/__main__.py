"""Entry point for running lasso_unpack as a module."""

import sys

from lasso_unpack.cli_entry import main

if __name__ == "__main__":
    sys.exit(main())
