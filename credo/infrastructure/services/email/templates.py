"""Jinja2 rendering of the activation and one-time code emails."""

from pathlib import Path

import structlog
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from credo.domain.interfaces.services import IMessageRenderer, RenderedMessage

logger = structlog.get_logger(__name__)

PURPOSE_SUBJECTS = {
    "signup": "Your account activation code",
    "password-reset": "Your password reset code",
    "login": "Your login code",
}


class JinjaMessageRenderer(IMessageRenderer):
    """Renders HTML email bodies from templates in `templates_dir`.

    Autoescaping is on, so user-controlled values such as the account name
    cannot inject markup.
    """

    def __init__(self, templates_dir: str, app_name: str = "Credo"):
        path = Path(templates_dir)
        if not path.is_dir():
            raise ValueError(f"Email templates directory not found: {templates_dir}")
        self.app_name = app_name
        self.env = Environment(
            loader=FileSystemLoader(str(path)),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
        )

    def render_activation(self, name: str, activation_link: str) -> RenderedMessage:
        body = self.env.get_template("activation.html").render(
            app_name=self.app_name,
            name=name,
            activation_link=activation_link,
        )
        return RenderedMessage(subject=f"Activate your {self.app_name} account", body=body)

    def render_otp(self, code: str, purpose: str, expires_in_minutes: int) -> RenderedMessage:
        body = self.env.get_template("otp.html").render(
            app_name=self.app_name,
            code=code,
            purpose=purpose,
            expires_in_minutes=expires_in_minutes,
        )
        return RenderedMessage(subject=PURPOSE_SUBJECTS.get(purpose, "Your one-time code"), body=body)
