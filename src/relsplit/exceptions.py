"""Exception types raised by the split engine."""


class RelsplitError(Exception):
    """Base class for errors raised by relsplit itself."""


class ConfigurationError(RelsplitError, ValueError):
    """Invalid or inconsistent run parameters. Raised before any I/O."""


class PartLimitExceededError(ConfigurationError):
    """A split would need more parts than the part-number width allows."""

    def __init__(self, path: str, needed: int, limit: int) -> None:
        self.path = path
        self.needed = needed
        self.limit = limit
        super().__init__(
            f"{path} needs {needed} parts but at most {limit} are allowed; "
            f"raise --chunk-bytes or the part width"
        )
