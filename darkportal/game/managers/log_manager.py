"""
Log management system for combat messages and debugging.

This module provides centralized, event-driven logging: every component emits
``LogMessage`` events and the LogManager categorizes, filters and buffers them
for display in the combat log.
"""
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ...core.events import DebugMessage, EventType, LogMessage as LogEvent

if TYPE_CHECKING:
    from ...core.events import EventManager, GameEvent
    from ...core.engine import GameState


class LogCategory(Enum):
    """Categories for log messages."""
    PLAYER = auto()     # Things the player did
    ENEMY = auto()      # Things the enemy did
    SYSTEM = auto()     # Encounter flow, shields, outcomes
    BATTLE = auto()     # Combat bookkeeping
    TIMELINE = auto()   # Scheduler processing
    DEBUG = auto()      # Debug messages
    WARNING = auto()    # Warning messages
    ERROR = auto()      # Error messages


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


CATEGORY_TAGS = {
    LogCategory.PLAYER: "PLR",
    LogCategory.ENEMY: "ENM",
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.TIMELINE: "TML",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


@dataclass
class LogEntry:
    """A single log message with metadata."""
    text: str
    category: LogCategory
    level: LogLevel = LogLevel.INFO
    timeline_time: int = 0

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the message for display."""
        parts = []

        if include_timestamp:
            seconds, millis = divmod(self.timeline_time, 1000)
            minutes, seconds = divmod(seconds, 60)
            parts.append(f"[{minutes:02d}:{seconds:02d}.{millis:03d}]")

        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")

        parts.append(self.text)
        return " ".join(parts)


class LogManager:
    """Manages the combat log with categorization and filtering."""

    def __init__(
        self,
        event_manager: "EventManager",
        game_state: "GameState",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO
    ):
        """Initialize the log manager.

        Args:
            event_manager: Event manager for event-driven logging (required)
            game_state: Game state to update with log data (required)
            max_messages: Maximum number of messages to store in the buffer
            default_level: Default log level for filtering
        """
        self.messages: deque[LogEntry] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)  # All categories enabled by default
        self.event_manager = event_manager
        self.game_state = game_state

        # These categories always log at a fixed level
        self.category_levels = {
            LogCategory.DEBUG: LogLevel.DEBUG,
            LogCategory.TIMELINE: LogLevel.DEBUG,
            LogCategory.WARNING: LogLevel.WARNING,
            LogCategory.ERROR: LogLevel.ERROR,
        }

        self._setup_event_subscriptions()
        self._update_game_state_log_data()

    def _update_game_state_log_data(self) -> None:
        """Update the game state with current log data for UI access."""
        self.game_state.log_data = {
            'messages': [msg.format() for msg in self.get_messages()],
            'debug_enabled': self.is_debug_enabled(),
            'total_messages': len(self.messages)
        }

    def _setup_event_subscriptions(self) -> None:
        self.event_manager.subscribe(
            EventType.LOG_MESSAGE,
            self._handle_log_message_event,
            subscriber_name="LogManager.log_message"
        )
        self.event_manager.subscribe(
            EventType.DEBUG_MESSAGE,
            self._handle_debug_message_event,
            subscriber_name="LogManager.debug_message"
        )
        self.event_manager.subscribe(
            EventType.RUN_RESET,
            self._handle_run_reset,
            subscriber_name="LogManager.run_reset"
        )

    def _handle_log_message_event(self, event: "GameEvent") -> None:
        if not isinstance(event, LogEvent):
            return

        try:
            category = LogCategory[event.category.upper()]
        except (KeyError, AttributeError):
            category = LogCategory.SYSTEM

        level = event.level if isinstance(event.level, LogLevel) else LogLevel.INFO
        self.log(event.message, category, level, event.timeline_time)

    def _handle_debug_message_event(self, event: "GameEvent") -> None:
        if isinstance(event, DebugMessage):
            self.log(f"[{event.source}] {event.message}", LogCategory.DEBUG,
                     LogLevel.DEBUG, event.timeline_time)

    def _handle_run_reset(self, event: "GameEvent") -> None:
        # A new run starts with an empty combat log
        self.clear()

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM,
            level: LogLevel = LogLevel.INFO, timeline_time: int = 0) -> None:
        """Add a message to the log.

        Args:
            text: The message text
            category: The category of the message
            level: Severity of the message
            timeline_time: Clock reading the message belongs to
        """
        level = self.category_levels.get(category, level)
        self.messages.append(LogEntry(text=text, category=category, level=level,
                                      timeline_time=timeline_time))
        self._update_game_state_log_data()

    # Convenience methods for common categories
    def player(self, text: str) -> None:
        self.log(text, LogCategory.PLAYER)

    def enemy(self, text: str) -> None:
        self.log(text, LogCategory.ENEMY)

    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG, LogLevel.DEBUG)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING, LogLevel.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR, LogLevel.ERROR)

    def get_messages(self, count: Optional[int] = None,
                     categories: Optional[set[LogCategory]] = None) -> list[LogEntry]:
        """Get recent messages, optionally filtered by category.

        Args:
            count: Maximum number of messages to return (None for all)
            categories: Set of categories to include (None for all enabled,
                filtered by the current log level)

        Returns:
            List of recent messages, oldest first
        """
        if categories:
            filtered = [msg for msg in self.messages
                        if msg.category in categories and msg.category in self.enabled_categories]
        else:
            filtered = [msg for msg in self.messages
                        if msg.category in self.enabled_categories
                        and msg.level.value >= self.log_level.value]

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def clear(self) -> None:
        """Clear all messages from the log."""
        self.messages.clear()
        self._update_game_state_log_data()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        """Check if debug messages are currently enabled."""
        return (LogCategory.DEBUG in self.enabled_categories and
                self.log_level == LogLevel.DEBUG)

    def toggle_debug(self) -> None:
        """Toggle debug message visibility."""
        if self.is_debug_enabled():
            self.disable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.INFO)
        else:
            self.enable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.DEBUG)

        self._update_game_state_log_data()
