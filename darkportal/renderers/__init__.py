"""Presentation sinks for outbound events."""
