"""Crisis classification domain models."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class CrisisSeverity(Enum):
    """Severity assigned to a student message by the crisis classifier."""
    NONE = "none"           # No crisis language found
    MODERATE = "moderate"   # Crisis language without immediate-risk phrases
    HIGH = "high"           # Immediate-risk phrase present (method, explicit intent)


@dataclass(frozen=True)
class CrisisAnalysis:
    """Result of classifying one message.

    Computed fresh per message and never persisted.
    """
    is_crisis: bool
    severity: CrisisSeverity = CrisisSeverity.NONE
    annotation: Optional[str] = None
    matched_keywords: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "matched_keywords", tuple(self.matched_keywords))
        if self.is_crisis and self.severity == CrisisSeverity.NONE:
            raise ValueError("Crisis analysis requires a severity above none")
        if not self.is_crisis and self.annotation is not None:
            raise ValueError("Annotation is only allowed on crisis analyses")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses and logging."""
        return {
            "is_crisis": self.is_crisis,
            "severity": self.severity.value,
            "annotation": self.annotation,
            "matched_keywords": list(self.matched_keywords),
        }
