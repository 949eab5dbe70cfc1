from .email_service import SmtpNotifier
from .templates import JinjaMessageRenderer

__all__ = ["SmtpNotifier", "JinjaMessageRenderer"]
