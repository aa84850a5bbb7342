"""Crisis classifier configuration and phrase lists.

The phrase and pattern lists are maintained safety data, not derived.
Bump pattern_version whenever any list below changes so published
crisis events can be traced to the list that produced them.
"""
import re
from dataclasses import dataclass
from typing import FrozenSet, Tuple


@dataclass(frozen=True)
class SafetyConfig:
    """Configuration for crisis classification."""

    # Version tracking for published crisis events
    pattern_version: str = "2025.09.01"


# Literal phrases matched as substrings of the lowercased, trimmed message
CRISIS_KEYWORDS: FrozenSet[str] = frozenset({
    # Direct self-harm language
    "suicide",
    "kill myself",
    "end it all",
    "don't want to live",
    "hurt myself",
    "self harm",
    "self-harm",
    "self injury",
    "cutting",
    "ending my life",
    "want to die",
    "better off dead",

    # Hopelessness
    "hopeless",
    "no point",
    "can't go on",
    "nothing matters",
    "give up",

    # Methods
    "overdose",
    "jump off",
    "razor",
    "pills",
    "bridge",
    "gun",
    "rope",
    "hanging",
    "drowning",
    "suffocate",
})

# Paraphrased crisis expressions the literal list misses
CRISIS_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"i (want to|gonna|going to) (die|kill myself|end it)", re.IGNORECASE),
    re.compile(r"life (isn't|is not) worth (living|it)", re.IGNORECASE),
    re.compile(r"nobody (cares|would miss me|loves me)", re.IGNORECASE),
    re.compile(r"world (would be better|is better) without me", re.IGNORECASE),
    re.compile(r"can't (take it|handle it|deal with it) anymore", re.IGNORECASE),
    re.compile(r"thinking about (dying|suicide|killing myself)", re.IGNORECASE),
)

# Subset of phrases that raise severity from moderate to high
IMMEDIATE_RISK_KEYWORDS: FrozenSet[str] = frozenset({
    "kill myself",
    "suicide",
    "end it all",
    "overdose",
    "jump off",
    "hanging",
    "gun",
    "razor",
})

# Appended to the stored user message when a crisis is detected
CRISIS_CONTEXT: str = (
    "\n\n[CRISIS ALERT: The user may be expressing thoughts of self-harm. "
    "Respond with immediate crisis resources and supportive language.]"
)
