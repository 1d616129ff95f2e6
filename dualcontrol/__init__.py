"""DualControl: maker-checker approval workflow engine."""

__version__ = "0.1.0"
