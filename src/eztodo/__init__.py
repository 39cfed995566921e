"""Personal todo / recurring-plan tracker backed by atomically written JSON files."""

__version__ = "0.1.0"
