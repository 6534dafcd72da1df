"""Bridge between a host application and the native platform layer."""

__version__ = "0.1.0"
