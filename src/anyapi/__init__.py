"""anyapi: discover and call OAuth-connected REST services without per-service code."""

__version__ = "0.1.0"
