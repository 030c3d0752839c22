"""NiceTimer: named sequences of timers played back-to-back."""

__version__ = "0.1.0"
