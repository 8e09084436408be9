"""wspack - pack project workspaces into publishable archives.

Decides whether a workspace needs an install before packing, renders the
archive destination, streams the tarball to disk and reports every step to
humans and NDJSON consumers alike.
"""

__version__ = "0.1.0"
__author__ = "wspack Contributors"

from wspack.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
