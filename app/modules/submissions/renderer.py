"""Message rendering for submission channels.

Pure functions: the same form and format always give the same body. Field
order and labels are fixed; absent values render as ``PLACEHOLDER``.
"""

from html import escape
from typing import List, NamedTuple, Optional

from infrastructure.notifications.models import BodyFormat
from modules.submissions.models import SubmissionForm

PLACEHOLDER = "-"
DEFAULT_BUSINESS_NAME = "Maa Bhawani Car Bazar"
DEFAULT_SUBJECT = "New Car Submission Received"


class FieldLabel(NamedTuple):
    attribute: str
    label: str
    text_label: str
    emoji: str


FIELD_LABELS: List[FieldLabel] = [
    FieldLabel("name", "Name", "Name", "👤"),
    FieldLabel("phone", "Phone", "Phone", "📞"),
    FieldLabel("email", "Email", "Email", "✉️"),
    FieldLabel("city", "City", "City", "🏙️"),
    FieldLabel("registration_number", "Registration Number", "Reg. Number", "🔢"),
    FieldLabel("rc_available", "RC Available", "RC Available", "📄"),
    FieldLabel("insurance_available", "Insurance Available", "Insurance Available", "📄"),
    FieldLabel("car_model", "Car Model", "Model", "🚘"),
    FieldLabel("variant", "Variant", "Variant", "🧩"),
    FieldLabel("fuel_type", "Fuel Type", "Fuel Type", "⛽"),
    FieldLabel("ownership", "Ownership", "Ownership", "👥"),
    FieldLabel("kilometers_driven", "Kilometers Driven", "KM Driven", "📊"),
    FieldLabel("expected_price", "Expected Price", "Expected Price", "💰"),
    FieldLabel("condition_scale", "Condition (1–10)", "Condition (1-10)", "📈"),
    FieldLabel("damage_remarks", "Damage Remarks", "Damage Remarks", "🛠️"),
]

_HTML_ROW = (
    '<tr>'
    '<td style="padding: 8px 0; font-weight: 600; color: #2d3748; '
    'vertical-align: top; width: 40%;">{label}</td>'
    '<td style="padding: 8px 0; color: #4a5568;">{value}</td>'
    "</tr>"
)


def field_value(form: SubmissionForm, attribute: str) -> str:
    """Value of a form field as display text, placeholder when blank."""
    value = getattr(form, attribute, None)
    if value is None or not str(value).strip():
        return PLACEHOLDER
    return str(value).strip()


def render(
    form: SubmissionForm,
    body_format: BodyFormat,
    business_name: str = DEFAULT_BUSINESS_NAME,
    logo_url: Optional[str] = None,
) -> str:
    """Render the submission body for a channel.

    Args:
        form: Submitted form
        body_format: HTML (email card) or TEXT (WhatsApp message)
        business_name: Name shown in headings and footers
        logo_url: Optional logo at the top of the HTML card

    Returns:
        The rendered body.
    """
    if body_format is BodyFormat.HTML:
        return _render_html(form, business_name, logo_url)
    return _render_text(form, business_name)


def render_subject(form: SubmissionForm, subject: str = DEFAULT_SUBJECT) -> str:
    """Email subject line, with the car model when one was given.

    Runs of whitespace, line breaks included, collapse to one space so the
    result is always a valid single-line header value.
    """
    heading = " ".join(subject.split())
    model = " ".join(field_value(form, "car_model").split())
    if model == PLACEHOLDER:
        return f"🚗 {heading}"
    return f"🚗 {heading}: {model}"


def _render_text(form: SubmissionForm, business_name: str) -> str:
    lines = [f"🚗 *New Car Submission - {business_name}*", ""]
    for field in FIELD_LABELS:
        lines.append(
            f"{field.emoji} *{field.text_label}:* {field_value(form, field.attribute)}"
        )
    return "\n".join(lines)


def _render_html(
    form: SubmissionForm, business_name: str, logo_url: Optional[str]
) -> str:
    name = escape(business_name)
    rows = "".join(
        _HTML_ROW.format(
            label=escape(field.label),
            value=escape(field_value(form, field.attribute)),
        )
        for field in FIELD_LABELS
    )
    logo = ""
    if logo_url:
        logo = (
            '<div style="text-align: left; margin-bottom: 24px;">'
            f'<img src="{escape(logo_url)}" alt="{name} Logo" style="max-height: 100px;" />'
            "</div>"
        )
    return (
        '<div style="font-family: \'Segoe UI\', Tahoma, sans-serif; '
        'background-color: #f4f6f8; padding: 40px;">'
        '<div style="max-width: 640px; margin: auto; background-color: #ffffff; '
        'padding: 32px 40px; border-radius: 8px;">'
        f"{logo}"
        '<h2 style="color: #1a202c; font-size: 20px; margin-bottom: 10px;">'
        "New Car Submission Received</h2>"
        '<p style="font-size: 15px; color: #4a5568; margin-bottom: 24px;">'
        f"A new car submission has been received on <strong>{name}</strong>. "
        "Below are the submitted details:</p>"
        '<table style="width: 100%; font-size: 14px; border-collapse: collapse;">'
        f"<tbody>{rows}</tbody></table>"
        '<p style="font-size: 14px; color: #718096; margin-top: 32px;">'
        "This is an automated message sent from your website's car submission portal.</p>"
        f'<p style="font-size: 14px; color: #2d3748; margin-top: 8px;">{name} Team</p>'
        "</div></div>"
    )
