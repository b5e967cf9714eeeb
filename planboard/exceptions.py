"""Planboard exception types."""


class ConfigError(Exception):
    """Raised when a layout configuration value is unusable."""

    def __init__(self, key: str, value, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for {key}: {value!r} ({reason})")


class ProjectFileError(Exception):
    """Raised when a project file cannot be read or written."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Project file {path}: {reason}")


class CardNotFoundError(KeyError):
    """Raised by a task store when asked to update an unknown card."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Card not found: {card_id}")

    def __str__(self) -> str:
        return self.args[0]


class UpdateRejectedError(Exception):
    """Raised when a task store refuses a status update."""

    def __init__(self, card_id: str, status, reason: str = "rejected by server"):
        self.card_id = card_id
        self.status = status
        self.reason = reason
        label = getattr(status, "value", status)
        super().__init__(f"Update of {card_id} to {label} failed: {reason}")
