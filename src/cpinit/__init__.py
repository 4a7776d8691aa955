"""cpinit - bootstrap a control plane from an ordered tree of install steps."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cpinit")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for editable installs without metadata

from .main import main

__all__ = ["main", "__version__"]
