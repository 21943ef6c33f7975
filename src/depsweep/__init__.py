"""depsweep - find and reclaim space from dependency directories."""

__version__ = "0.3.0"
