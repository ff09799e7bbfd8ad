"""Allow ``python -m dockerrun_cli`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m dockerrun_cli`` behaves identically to the
``dockerrun-cli`` console script.
"""

from __future__ import annotations

from dockerrun_cli.cli.app import cli

if __name__ == "__main__":
    cli()
