"""Template rendering for email notifications using Jinja2.

Each message family has a subject template and a plain text body, and most
have an HTML body:

    <family>_subject.j2
    <family>_body.txt.j2
    <family>_body.html.j2   (optional)

Only the HTML templates are autoescaped; undefined variables are errors.
"""

import re
from typing import Dict, Optional, Tuple

from jinja2 import (
    Environment,
    PackageLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)
from markupsafe import Markup, escape

from notifier.logging import get_logger

from .models import NotificationTemplateError, RenderedEmail

logger = get_logger(__name__, component="templates")

LINE_BREAKS = re.compile(r"[\r\n]+")

# family -> has HTML body
TEMPLATE_FAMILIES: Dict[str, bool] = {
    "contact_form": True,
    "emergency_alert": True,
    "evacuation_update": False,
    "priority_notice": False,
    "subscription_welcome": True,
    "transport_test": True,
}


def nl2br(value) -> Markup:
    """Escape a value and turn its line breaks into <br> tags."""
    text = str(value).replace("\r\n", "\n")
    return Markup(escape(text).replace("\n", Markup("<br>\n")))


class TemplateRenderer:
    """Renders email templates from the notifier.mail.email_templates package.

    Compiled templates are cached by the Jinja2 environment.
    """

    def __init__(self, template_dir: str = "email_templates"):
        """Initialize template renderer with a Jinja2 environment.

        Args:
            template_dir: Directory name within the notifier.mail package
        """
        self.env = Environment(
            loader=PackageLoader("notifier.mail", template_dir),
            autoescape=select_autoescape(
                enabled_extensions=("html.j2",),
                default_for_string=False,
                default=False,
            ),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        self.env.filters["nl2br"] = nl2br

        logger.debug(f"Initialized TemplateRenderer with templates from {template_dir}")

    @staticmethod
    def template_names(family: str) -> Tuple[str, str, Optional[str]]:
        """Return (subject, text, html) template names for a family."""
        if family not in TEMPLATE_FAMILIES:
            raise NotificationTemplateError(f"Unknown template family: {family}")
        html_name = f"{family}_body.html.j2" if TEMPLATE_FAMILIES[family] else None
        return f"{family}_subject.j2", f"{family}_body.txt.j2", html_name

    def render(self, family: str, context: Dict) -> RenderedEmail:
        """Render subject and bodies of one message family.

        Args:
            family: Template family name (see TEMPLATE_FAMILIES)
            context: Template variables

        Returns:
            RenderedEmail with a single-line subject

        Raises:
            NotificationTemplateError: If the family is unknown or rendering fails
        """
        subject_name, text_name, html_name = self.template_names(family)

        try:
            subject = self.env.get_template(subject_name).render(context)
            subject = LINE_BREAKS.sub(" ", subject.strip())

            text = self.env.get_template(text_name).render(context).strip() + "\n"
            html = self.env.get_template(html_name).render(context) if html_name else None

        except TemplateError as e:
            error_msg = f"Template rendering failed for {family}: {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e

        logger.debug(f"Rendered {family} templates", extra={"template_family": family})
        return RenderedEmail(subject=subject, text=text, html=html)
