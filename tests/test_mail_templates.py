"""Tests for template rendering and context builders."""

from datetime import datetime, timezone

import pytest
from markupsafe import Markup

from notifier.mail import (
    AlertLevel,
    ContactFormSubmission,
    EmergencyAlertPayload,
    EvacuationCenterUpdate,
    NotificationTemplateError,
    TemplateRenderer,
)
from notifier.mail.payloads import (
    NEUTRAL_COLOR,
    build_contact_form_context,
    build_emergency_alert_context,
    build_evacuation_update_context,
    build_priority_notice_context,
    build_subscription_context,
    build_test_message_context,
    severity_color,
)
from notifier.mail.templates import TEMPLATE_FAMILIES, nl2br


@pytest.fixture(scope="module")
def renderer():
    return TemplateRenderer()


@pytest.fixture
def contact_submission():
    return ContactFormSubmission(
        name="Ana Cruz",
        email="ana@example.com",
        subject="Flooding on Main St",
        message="Water is rising.\nPlease advise.",
        inquiryType="report",
    )


def make_alert(level="critical", location="Barangay 5", content="Evacuate now"):
    return EmergencyAlertPayload(
        title="Typhoon Warning", content=content, alertLevel=level, location=location
    )


class TestSeverityColor:
    @pytest.mark.parametrize(
        "level, color",
        [
            ("low", "#28a745"),
            ("medium", "#ffc107"),
            ("high", "#fd7e14"),
            ("critical", "#dc3545"),
        ],
    )
    def test_known_levels(self, level, color):
        assert severity_color(level) == color
        assert severity_color(AlertLevel(level)) == color

    def test_unknown_level_is_neutral(self):
        assert severity_color("extreme") == NEUTRAL_COLOR


class TestEmergencyAlert:
    def test_subject_contains_upper_level(self, renderer):
        rendered = renderer.render("emergency_alert", build_emergency_alert_context(make_alert()))

        assert rendered.subject == "🚨 [CRITICAL] Typhoon Warning"

    def test_html_uses_level_color_and_label(self, renderer):
        rendered = renderer.render("emergency_alert", build_emergency_alert_context(make_alert("high")))

        assert "#fd7e14" in rendered.html
        assert "HIGH PRIORITY" in rendered.html

    def test_location_block_only_when_present(self, renderer):
        with_location = renderer.render("emergency_alert", build_emergency_alert_context(make_alert()))
        without = renderer.render(
            "emergency_alert", build_emergency_alert_context(make_alert(location=None))
        )

        assert "📍 Location" in with_location.html
        assert "Location: Barangay 5" in with_location.text
        assert "📍 Location" not in without.html
        assert "Location:" not in without.text

    def test_text_body(self, renderer):
        rendered = renderer.render("emergency_alert", build_emergency_alert_context(make_alert()))

        assert "Priority: CRITICAL" in rendered.text
        assert "Evacuate now" in rendered.text
        assert "call 911 immediately" in rendered.text

    def test_content_is_escaped_in_html(self, renderer):
        alert = make_alert(content="<script>alert(1)</script>\nline two")
        rendered = renderer.render("emergency_alert", build_emergency_alert_context(alert))

        assert "<script>" not in rendered.html
        assert "&lt;script&gt;" in rendered.html
        assert "<br>" in rendered.html
        # Plain text is never escaped
        assert "<script>alert(1)</script>" in rendered.text


class TestContactForm:
    def test_render(self, renderer, contact_submission):
        rendered = renderer.render("contact_form", build_contact_form_context(contact_submission))

        assert rendered.subject == "[Amayalert] Flooding on Main St"
        assert "Name: Ana Cruz" in rendered.text
        assert "Inquiry Type: report" in rendered.text
        assert "Water is rising.<br>" in rendered.html

    def test_ampersand_not_escaped_in_text(self, renderer):
        submission = ContactFormSubmission(
            name="Tom & Jerry",
            email="tj@example.com",
            subject="Q&A",
            message="Hi",
            inquiry_type="general",
        )

        rendered = renderer.render("contact_form", build_contact_form_context(submission))

        assert rendered.subject == "[Amayalert] Q&A"
        assert "Name: Tom & Jerry" in rendered.text
        assert "Tom &amp; Jerry" in rendered.html

    @pytest.mark.parametrize("subject", ["Hi\nthere", "Hi\rthere", "Hi\r\nthere"])
    def test_subject_line_breaks_collapse(self, renderer, subject):
        submission = ContactFormSubmission(
            name="Ana Cruz",
            email="ana@example.com",
            subject=subject,
            message="Hello",
            inquiryType="general",
        )

        rendered = renderer.render("contact_form", build_contact_form_context(submission))

        assert rendered.subject == "[Amayalert] Hi there"


class TestOtherFamilies:
    def test_evacuation_update(self, renderer):
        update = EvacuationCenterUpdate(
            name="Central School",
            address="12 Rizal Ave",
            status="full",
            capacity=200,
            currentOccupancy=200,
        )

        rendered = renderer.render("evacuation_update", build_evacuation_update_context(update))

        assert rendered.subject == "Evacuation Center Update: Central School"
        assert "reached capacity" in rendered.text
        assert "- Status: FULL" in rendered.text
        assert "- Capacity: 200/200" in rendered.text
        assert rendered.html is None

    def test_evacuation_update_without_capacity(self):
        update = EvacuationCenterUpdate(name="Gym", address="1 Main St", status="open")

        assert build_evacuation_update_context(update)["capacity_line"] is None

    @pytest.mark.parametrize(
        "level, label",
        [
            ("low", "Advisory Notice"),
            ("medium", "Important Notice"),
            ("high", "Urgent Alert"),
            ("critical", "🚨 EMERGENCY ALERT"),
            ("bogus", "Important Notice"),
        ],
    )
    def test_priority_notice_subject(self, renderer, level, label):
        rendered = renderer.render(
            "priority_notice", build_priority_notice_context("Road closed", level)
        )

        assert rendered.subject == f"[AmayAlert] {label}"
        assert rendered.text == "Road closed\n"

    def test_subscription_welcome(self, renderer):
        rendered = renderer.render("subscription_welcome", build_subscription_context("  Ana "))

        assert rendered.subject == "Welcome to AmayAlert Emergency Notifications"
        assert "Hello, Ana!" in rendered.html

    def test_subscription_welcome_without_name(self, renderer):
        rendered = renderer.render("subscription_welcome", build_subscription_context(None))

        assert "Hello!" in rendered.html

    def test_transport_test(self, renderer):
        sent_at = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        rendered = renderer.render("transport_test", build_test_message_context("staging", sent_at))

        assert rendered.subject == "Amayalert Email Test"
        assert "2025-01-02T03:04:05+00:00" in rendered.text
        assert "Environment: staging" in rendered.text


class TestRenderer:
    def test_every_family_has_templates(self, renderer):
        for family, has_html in TEMPLATE_FAMILIES.items():
            subject, text, html = renderer.template_names(family)
            renderer.env.get_template(subject)
            renderer.env.get_template(text)
            assert (html is not None) == has_html

    def test_unknown_family(self, renderer):
        with pytest.raises(NotificationTemplateError, match="Unknown template family"):
            renderer.render("newsletter", {})

    def test_missing_variable_is_an_error(self, renderer):
        with pytest.raises(NotificationTemplateError):
            renderer.render("priority_notice", {"message": "no label"})

    def test_nl2br(self):
        result = nl2br("a & b\r\nc")

        assert isinstance(result, Markup)
        assert result == "a &amp; b<br>\nc"
