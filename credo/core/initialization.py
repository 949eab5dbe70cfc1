"""Application initialization and setup.

Runs the tasks required before the application object is built: loading
the `.env` file, configuring structured logging and validating the
environment-dependent settings.
"""

from dotenv import load_dotenv

from credo.core.config.settings import settings
from credo.core.logging import configure_logging


def initialize_application() -> None:
    """Initialize the application with all necessary setup tasks."""
    # Make .env values visible to libraries reading os.environ directly
    load_dotenv(override=False)

    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    settings.validate_required_fields()
