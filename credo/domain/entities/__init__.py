"""Export authentication domain entities for use across the application."""

from .account import Account, Gender, Role
from .one_time_code import OneTimeCode, OtpPurpose

__all__ = ["Account", "Gender", "Role", "OneTimeCode", "OtpPurpose"]
