"""
Logger configuration management
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from logbus.core.log_level import MessageType


@dataclass
class LoggerConfig:
    """
    Logger configuration.

    Values here are the defaults used when the settings store has no
    stored preference yet.
    """

    # Basic settings
    name: str = "logbus"
    default_level: MessageType = MessageType.FATAL

    # Debug and Trace messages are dropped entirely in release mode
    release_mode: bool = False

    # Session settings
    remember_session_config: bool = False
    session_path: Path = field(default_factory=lambda: Path("session") / "last_log_config.lbs")

    # Dispatch settings
    async_dispatch: bool = False
    queue_size: int = 10000

    # Console settings
    console_colored: bool = True

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not isinstance(self.default_level, MessageType):
            raise TypeError("default_level must be MessageType enum")
        if self.queue_size <= 0:
            raise ValueError("queue_size must be positive")

        # Convert session_path to Path if it's a string
        if isinstance(self.session_path, str):
            self.session_path = Path(self.session_path)

    @classmethod
    def default(cls) -> "LoggerConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def debug_config(cls) -> "LoggerConfig":
        """Create configuration for debugging."""
        return cls(
            default_level=MessageType.TRACE,
            release_mode=False,
            async_dispatch=False,
        )

    @classmethod
    def release_config(cls, session_path: Optional[Path] = None) -> "LoggerConfig":
        """Create configuration for release builds."""
        config = cls(
            default_level=MessageType.WARNING,
            release_mode=True,
            remember_session_config=True,
            async_dispatch=True,
            console_colored=False,
        )
        if session_path is not None:
            config.session_path = Path(session_path)
        return config
