"""Tests for static crisis resources and templates."""
from mindwell.shared.models import CrisisSeverity
from mindwell.services.safety_service import (
    get_crisis_resources,
    get_crisis_response_template,
)


class TestCrisisResources:

    def test_immediate_contacts(self):
        resources = get_crisis_resources()

        assert resources["immediate"]["suicide_prevention"]["number"] == "988"
        assert resources["immediate"]["crisis_text"]["number"] == "741741"
        assert resources["immediate"]["emergency"]["number"] == "911"
        assert len(resources["online"]) == 2
        assert "Campus counseling services" in resources["follow_up"]


class TestResponseTemplates:

    def test_high_template(self):
        template = get_crisis_response_template(CrisisSeverity.HIGH)
        assert "IMMEDIATE CRISIS RESOURCES" in template
        assert "911" in template

    def test_moderate_template_from_string(self):
        template = get_crisis_response_template("moderate")
        assert "Crisis Support Available" in template

    def test_unknown_severity_falls_back_to_moderate(self):
        moderate = get_crisis_response_template(CrisisSeverity.MODERATE)

        assert get_crisis_response_template("severe") == moderate
        assert get_crisis_response_template(CrisisSeverity.NONE) == moderate
