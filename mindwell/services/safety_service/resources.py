"""Static crisis resources and response templates.

No AI-generated content here. These are shown by the front-end when a
crisis is flagged, alongside whatever the model replied.
"""
from typing import Any, Dict, Union

from mindwell.shared.models import CrisisSeverity


def get_crisis_resources() -> Dict[str, Any]:
    """Get the crisis resource directory.

    Returns:
        Immediate contacts, online support and follow-up options
    """
    return {
        "immediate": {
            "suicide_prevention": {
                "number": "988",
                "description": "National Suicide Prevention Lifeline - Available 24/7",
            },
            "crisis_text": {
                "number": "741741",
                "text": "HOME",
                "description": "Crisis Text Line - Text HOME to 741741",
            },
            "emergency": {
                "number": "911",
                "description": "Emergency Services - For immediate danger",
            },
        },
        "online": [
            {
                "name": "Crisis Chat",
                "url": "https://suicidepreventionlifeline.org/chat/",
                "description": "24/7 online crisis chat support",
            },
            {
                "name": "Campus Resources",
                "description": "Contact your campus counseling center for support",
            },
        ],
        "follow_up": [
            "Campus counseling services",
            "Student mental health services",
            "Local mental health crisis centers",
            "Trusted friends, family, or mentors",
        ],
    }


_RESPONSE_TEMPLATES = {
    CrisisSeverity.HIGH: (
        "**IMMEDIATE CRISIS RESOURCES**\n\n"
        "I'm very concerned about what you've shared. Please reach out for immediate help:\n\n"
        "**Call 988** - National Suicide Prevention Lifeline (24/7)\n"
        "**Text HOME to 741741** - Crisis Text Line (24/7)\n"
        "**Call 911** - If you're in immediate danger\n\n"
        "You are not alone, and there are people who want to help you right now. "
        "Please reach out to one of these resources immediately."
    ),
    CrisisSeverity.MODERATE: (
        "I hear that you're going through a really difficult time right now, "
        "and I'm glad you felt comfortable sharing that with me.\n\n"
        "**Crisis Support Available:**\n"
        "- 988 - National Suicide Prevention Lifeline\n"
        "- Text HOME to 741741 - Crisis Text Line\n"
        "- Campus counseling services\n\n"
        "These feelings can be overwhelming, but they can also change with proper support. "
        "Would you like to talk about what's been contributing to these feelings?"
    ),
}


def get_crisis_response_template(
    severity: Union[CrisisSeverity, str] = CrisisSeverity.MODERATE,
) -> str:
    """Get the static response template for a crisis severity.

    Unknown severities (including "none") fall back to the moderate template.
    """
    if isinstance(severity, str):
        try:
            severity = CrisisSeverity(severity)
        except ValueError:
            severity = CrisisSeverity.MODERATE
    return _RESPONSE_TEMPLATES.get(severity, _RESPONSE_TEMPLATES[CrisisSeverity.MODERATE])
