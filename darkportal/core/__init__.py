"""Core systems: data definitions, engine, entity foundation and events."""
