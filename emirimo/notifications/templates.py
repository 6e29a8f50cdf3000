"""Template rendering for notification emails using Jinja2.

Each email kind has a subject template and a plain-text body template in
the email_templates package directory:

    <kind>_subject.j2
    <kind>_body.txt.j2
"""

import logging
from typing import Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from .models import NotificationTemplateError

logger = logging.getLogger(__name__)

JOB_RECOMMENDATION = "job_recommendation"
WEEKLY_DIGEST = "weekly_digest"
APPLICATION_REMINDER = "application_reminder"


class TemplateRenderer:
    """Renders email subjects and plain-text bodies.

    StrictUndefined makes a missing context key fail loudly instead of
    rendering an empty string into a user's inbox.
    """

    def __init__(self, template_dir: str = "email_templates"):
        self.env = Environment(
            loader=PackageLoader("emirimo.notifications", template_dir),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        logger.debug(f"Initialized TemplateRenderer with templates from {template_dir}")

    def render(self, kind: str, context: Dict) -> Dict[str, str]:
        """Render the subject and body for one email kind.

        Args:
            kind: Template prefix (job_recommendation, weekly_digest, application_reminder)
            context: Template variables

        Returns:
            Dictionary with "subject" (single line) and "text_body"

        Raises:
            NotificationTemplateError: If a template is missing or fails to render
        """
        try:
            subject_template = self.env.get_template(f"{kind}_subject.j2")
            body_template = self.env.get_template(f"{kind}_body.txt.j2")

            subject = " ".join(subject_template.render(context).split())
            text_body = body_template.render(context)

            logger.debug(f"Rendered {kind} templates")

            return {"subject": subject, "text_body": text_body}

        except TemplateError as e:
            error_msg = f"Template rendering failed for {kind}: {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e
