"""graphedit - node-link graph editing, layout and analytics."""

__version__ = "0.1.0"
