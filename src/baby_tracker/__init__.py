"""Baby tracker - local record store for feeding, sleep and growth logs."""

__version__ = "0.1.0"
