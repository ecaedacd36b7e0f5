"""Dark Portal: a real-time-with-cooldowns combat core for a four-encounter campaign."""

__version__ = "0.1.0"
