"""Crisis classifier - lexical guardrail in front of the LLM.

Every student message is classified before it is stored or sent to the
completion service. Classification is pure and deterministic: the same
text always yields the same CrisisAnalysis.

This is a best-effort filter. The phrase and pattern lists catch what
they list and nothing more; there is no language understanding here.
"""
import logging
import re
from typing import Iterable, List, Optional, Sequence

from mindwell.shared.models import CrisisAnalysis, CrisisSeverity
from .config import (
    CRISIS_CONTEXT,
    CRISIS_KEYWORDS,
    CRISIS_PATTERNS,
    IMMEDIATE_RISK_KEYWORDS,
    SafetyConfig,
)

logger = logging.getLogger(__name__)

NO_CRISIS = CrisisAnalysis(is_crisis=False)


class CrisisClassifier:
    """Keyword and pattern based crisis classifier.

    Layers:
    1. Literal phrase containment (case-insensitive substring)
    2. Regex templates for paraphrased crisis expressions
    3. Severity: high if an immediate-risk phrase is present, else moderate
    """

    def __init__(
        self,
        config: Optional[SafetyConfig] = None,
        keywords: Optional[Iterable[str]] = None,
        patterns: Optional[Sequence[re.Pattern]] = None,
        immediate_keywords: Optional[Iterable[str]] = None,
        annotation: str = CRISIS_CONTEXT,
    ):
        """Initialize classifier with phrase lists.

        Args:
            config: Classifier configuration (pattern version)
            keywords: Literal crisis phrases, defaults to CRISIS_KEYWORDS
            patterns: Compiled crisis patterns, defaults to CRISIS_PATTERNS
            immediate_keywords: Phrases marking high severity
            annotation: Text appended to crisis messages
        """
        self.config = config or SafetyConfig()
        # Sorted so matched_keywords comes out in a stable order
        self._keywords = sorted(
            k.lower() for k in (CRISIS_KEYWORDS if keywords is None else keywords)
        )
        self._patterns = tuple(CRISIS_PATTERNS if patterns is None else patterns)
        self._immediate_keywords = sorted(
            k.lower()
            for k in (IMMEDIATE_RISK_KEYWORDS if immediate_keywords is None else immediate_keywords)
        )
        self.annotation = annotation

        logger.info(
            "CRISIS_CLASSIFIER_INITIALIZED",
            extra={
                "pattern_version": self.config.pattern_version,
                "keyword_count": len(self._keywords),
                "pattern_count": len(self._patterns),
                "immediate_keyword_count": len(self._immediate_keywords),
            }
        )

    @property
    def pattern_version(self) -> str:
        return self.config.pattern_version

    def classify(self, text: object) -> CrisisAnalysis:
        """Classify a message.

        Args:
            text: Raw message text; non-string input is never a crisis

        Returns:
            CrisisAnalysis with severity and annotation
        """
        if not isinstance(text, str) or not text:
            return NO_CRISIS

        normalized = text.lower().strip()
        matches = self._match(normalized)
        if not matches:
            return NO_CRISIS

        # Severity looks at the original text, lowercased but not trimmed
        original_lower = text.lower()
        if any(keyword in original_lower for keyword in self._immediate_keywords):
            severity = CrisisSeverity.HIGH
        else:
            severity = CrisisSeverity.MODERATE

        return CrisisAnalysis(
            is_crisis=True,
            severity=severity,
            annotation=self.annotation,
            matched_keywords=matches,
        )

    def _match(self, normalized: str) -> List[str]:
        matches = [keyword for keyword in self._keywords if keyword in normalized]
        matches.extend(
            pattern.pattern for pattern in self._patterns if pattern.search(normalized)
        )
        return matches


_default_classifier: Optional[CrisisClassifier] = None


def classify(text: object) -> CrisisAnalysis:
    """Classify text with the default phrase lists."""
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = CrisisClassifier()
    return _default_classifier.classify(text)
