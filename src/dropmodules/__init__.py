"""dropmodules - find and delete node_modules directories."""

__version__ = "0.1.0"
