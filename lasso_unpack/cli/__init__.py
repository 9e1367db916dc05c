"""Command-line output helpers for lasso-unpack."""
