"""remotelink: web links and pull request lookups for git remotes."""

__version__ = "0.1.0"
