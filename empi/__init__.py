"""Building blocks for matching pursuit decomposition: envelope families, signal readers, task queues, logging and run preparation."""

__version__ = "1.0.0"

__all__ = ["family", "log", "prepare", "signal_reader", "taskqueue", "types"]