# nexow/domain/errors.py


class EngineError(Exception):
    """Base error of the simulation engine."""


class ConfigError(EngineError):
    """Invalid engine configuration, raised at launch before any bar is processed."""


class StrategyError(EngineError):
    """Strategy could not be trained or queried."""


class TrainingFailed(StrategyError):
    """The classifier fit failed; the strategy stays on its fallback heuristic."""

    def __init__(self, reason: str):
        super().__init__(f"training failed: {reason}")
        self.reason = reason


class ChannelClosed(EngineError):
    """Event stream is closed and fully drained."""
