"""
Diagnostic log for the combat engine and the run manager.

Components never call the LogManager directly: they publish LogMessage and
DebugMessage events and the manager collects them into a bounded buffer.
What a reader sees is decided by a LogFilter (minimum level plus enabled
categories); saving to disk always writes the whole buffer.

The player-facing combat log lives on the BattleState and is separate from
this.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Iterable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ...core.events import CombatEvent, EventManager


class LogCategory(Enum):
    """What part of the engine a message is about."""
    SYSTEM = auto()     # Encounter setup, catalog loading
    BATTLE = auto()     # Card plays and enemy actions
    STATUS = auto()     # Status ticks and decay
    INTENT = auto()     # Enemy intent telegraphs
    RUN = auto()        # Floors, rooms, rewards
    DEBUG = auto()
    WARNING = auto()
    ERROR = auto()


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.STATUS: "STS",
    LogCategory.INTENT: "INT",
    LogCategory.RUN: "RUN",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


class LogLevel(Enum):
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


# Level given to messages that arrive without one
CATEGORY_DEFAULT_LEVELS = {
    LogCategory.DEBUG: LogLevel.DEBUG,
    LogCategory.STATUS: LogLevel.DEBUG,
    LogCategory.INTENT: LogLevel.DEBUG,
    LogCategory.WARNING: LogLevel.WARNING,
    LogCategory.ERROR: LogLevel.ERROR,
}


def default_level(category: LogCategory) -> LogLevel:
    return CATEGORY_DEFAULT_LEVELS.get(category, LogLevel.INFO)


def parse_category(name: Any) -> LogCategory:
    """Map a category name from an event onto LogCategory (SYSTEM if unknown)."""
    try:
        return LogCategory[str(name).upper()]
    except KeyError:
        return LogCategory.SYSTEM


@dataclass
class LogMessage:
    """A single diagnostic message."""
    text: str
    category: LogCategory
    level: LogLevel = LogLevel.INFO
    source: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """One-line rendering for a log panel."""
        prefix = []
        if include_timestamp:
            prefix.append(self.timestamp.strftime("[%H:%M:%S]"))
        if include_category:
            prefix.append(f"[{CATEGORY_TAGS[self.category]}]")
        return " ".join(prefix + [self.text])

    def file_line(self) -> str:
        stamp = self.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        return f"[{stamp}] [{self.category.name}] [{self.level.name}] {self.text}"


@dataclass
class LogFilter:
    """Minimum level plus the set of visible categories."""
    min_level: LogLevel = LogLevel.INFO
    categories: set[LogCategory] = field(default_factory=lambda: set(LogCategory))

    def accepts(self, message: LogMessage) -> bool:
        return message.category in self.categories and message.level.value >= self.min_level.value


class LogManager:
    """Collects engine diagnostics from the event bus."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO,
        log_dir: str = "logs",
    ):
        """Initialize the log manager.

        Args:
            event_manager: Bus the manager listens on
            max_messages: Buffer size; the oldest messages are dropped first
            default_level: Minimum level shown by get_messages()
            log_dir: Directory save_log_to_file() writes into
        """
        self.messages: deque[LogMessage] = deque(maxlen=max_messages)
        self.filter = LogFilter(min_level=default_level)
        self.event_manager = event_manager
        self.log_dir = log_dir

        self._subscribe()

    def _subscribe(self) -> None:
        from ...core.events import EventType

        handlers = {
            EventType.LOG_MESSAGE: self._on_log_message,
            EventType.DEBUG_MESSAGE: self._on_debug_message,
            EventType.LOG_SAVE_REQUESTED: self._on_save_requested,
        }
        for event_type, handler in handlers.items():
            self.event_manager.subscribe(
                event_type, handler, subscriber_name=f"LogManager.{event_type.name.lower()}"
            )

    # Event handlers

    def _on_log_message(self, event: "CombatEvent") -> None:
        from ...core.events import LogMessage as LogEvent
        if not isinstance(event, LogEvent):
            return
        category = parse_category(event.category)
        level = event.level if isinstance(event.level, LogLevel) else None
        self._append(event.message, category, level, event.source)

    def _on_debug_message(self, event: "CombatEvent") -> None:
        from ...core.events import DebugMessage
        if not isinstance(event, DebugMessage):
            return
        text = f"[{event.source}] {event.message}"
        if event.context:
            text += " (" + ", ".join(f"{key}={value}" for key, value in event.context.items()) + ")"
        self._append(text, LogCategory.DEBUG, LogLevel.DEBUG, event.source)

    def _on_save_requested(self, event: "CombatEvent") -> None:
        self.save_log_to_file()

    def _append(self, text: str, category: LogCategory, level: Optional[LogLevel],
                source: str) -> None:
        self.messages.append(LogMessage(
            text=text,
            category=category,
            level=level or default_level(category),
            source=source,
        ))

    # Direct logging, mostly for the manager's own messages and for tests

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM,
            level: Optional[LogLevel] = None) -> None:
        self._append(text, category, level, "LogManager")

    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def battle(self, text: str) -> None:
        self.log(text, LogCategory.BATTLE)

    def status(self, text: str) -> None:
        self.log(text, LogCategory.STATUS)

    def intent(self, text: str) -> None:
        self.log(text, LogCategory.INTENT)

    def run(self, text: str) -> None:
        self.log(text, LogCategory.RUN)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR)

    # Reading

    def get_messages(self, count: Optional[int] = None,
                     categories: Optional[Iterable[LogCategory]] = None) -> list[LogMessage]:
        """Visible messages, oldest first.

        Args:
            count: Keep only the newest ``count`` messages
            categories: Explicit categories to show; bypasses the level filter
                but not disabled categories
        """
        if categories:
            wanted = set(categories) & self.filter.categories
            visible = [msg for msg in self.messages if msg.category in wanted]
        else:
            visible = [msg for msg in self.messages if self.filter.accepts(msg)]
        if count is not None:
            visible = visible[-count:] if count > 0 else []
        return visible

    def summary(self) -> dict[str, Any]:
        """Rendered view of the visible messages for a UI panel."""
        return {
            'messages': [msg.format() for msg in self.get_messages()],
            'debug_enabled': self.is_debug_enabled(),
            'total_messages': len(self.messages),
        }

    def clear(self) -> None:
        self.messages.clear()

    # Filtering

    def enable_category(self, category: LogCategory) -> None:
        self.filter.categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.filter.categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        self.filter.min_level = level

    @property
    def log_level(self) -> LogLevel:
        return self.filter.min_level

    def is_debug_enabled(self) -> bool:
        return LogCategory.DEBUG in self.filter.categories and self.filter.min_level == LogLevel.DEBUG

    def toggle_debug(self) -> None:
        """Switch between showing everything and the INFO view without DEBUG."""
        if self.is_debug_enabled():
            self.disable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.INFO)
        else:
            self.enable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.DEBUG)

    # Persistence

    def save_log_to_file(self) -> Optional[str]:
        """Write the whole buffer, ignoring filters, to a timestamped file.

        Returns:
            Path of the written file, or None if it could not be written
        """
        now = datetime.now()
        filepath = os.path.join(self.log_dir, f"log_{now.strftime('%Y%m%d_%H%M%S_%f')}.log")
        header = [
            "Genesis Combat Engine - Log",
            f"Generated: {now.strftime('%Y-%m-%d %H:%M:%S')}",
            "=" * 60,
            "",
        ]
        body = [msg.file_line() for msg in self.messages] or ["No messages to save."]

        try:
            os.makedirs(self.log_dir, exist_ok=True)
            with open(filepath, "w", encoding="utf-8") as f:
                f.write("\n".join(header + body) + "\n")
        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return None

        self.system(f"Log saved to {filepath}")
        return filepath
