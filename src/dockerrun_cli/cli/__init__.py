"""CLI layer — argument parsing, rendering, and the error boundary.

This package is the outermost layer of the application.  It may import
from ``core`` and ``infra``, but no other layer may import from ``cli``.
It is the only layer that writes to stdout/stderr.
"""
