"""dockerrun-cli — command-line client for the ``url://dockerrun/`` service.

Starts, inspects, pauses, resumes and terminates remote containers
through a resolved, sandboxed connection to the container service.
"""

from dockerrun_cli.version import __version__

__all__: list[str] = ["__version__"]
