"""
gnetdump - GCP network topology dump
"""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("gnetdump")
except PackageNotFoundError:
    __version__ = "0.0.0"
