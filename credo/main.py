"""Main application entry point.

    uvicorn credo.main:app
"""

from credo.core.application import create_application
from credo.core.initialization import initialize_application

initialize_application()

app = create_application()
