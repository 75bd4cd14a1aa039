# canteen/main.py
import uvicorn

from canteen.api import create_app
from canteen.data.database import Base, engine
from canteen.data.models import DocumentModel  # noqa: F401 rejestracja w Base.metadata
from canteen.data.seed import seed
from canteen.utils.logging import get_logger, setup_logging
from canteen.utils.settings import LOG_LEVEL, SEED_DEMO_DATA

setup_logging(LOG_LEVEL)
logger = get_logger(__name__)

logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")

try:
    Base.metadata.create_all(bind=engine)
except Exception as e:
    logger.critical(f"Failed to create tables: {e}")
    raise

if SEED_DEMO_DATA:
    seed()

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
