"""tsumesight - liberty-reading trainer for Go game records."""

__version__ = "0.4.0"
