# Load environment variables FIRST, before any module imports that need them
from dotenv import load_dotenv
load_dotenv()

import logging

from .app_factory import create_app
from .logging_config import setup_logging

# Configure logging at module load time
setup_logging()

logger = logging.getLogger(__name__)

# Database migrations are handled by Alembic.
# Run `alembic upgrade head` to create the tables before starting the server.

app = create_app()
