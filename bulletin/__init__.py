"""Real-time requirements board: LRN -> outstanding requirements, pushed live over WebSockets."""

__version__ = "1.0.0"
