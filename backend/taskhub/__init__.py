"""TaskHub backend: workspaces, tasks and recurring task series."""

__version__ = "0.1.0"
