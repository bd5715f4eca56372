"""Split oversized release artifacts into numbered, size-bounded parts."""

__version__ = "0.1.0"

from relsplit.config import RunConfiguration
from relsplit.exceptions import ConfigurationError, PartLimitExceededError, RelsplitError
from relsplit.models import Candidate, PartFile, RunSummary, SplitResult

__all__ = [
    "Candidate",
    "ConfigurationError",
    "PartFile",
    "PartLimitExceededError",
    "RelsplitError",
    "RunConfiguration",
    "RunSummary",
    "SplitResult",
    "__version__",
]
