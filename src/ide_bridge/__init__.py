"""Live IDE context over a loopback HTTP bridge."""

PLUGIN_NAME = "ide-bridge"
__version__ = "1.1.0"
