# app/main.py
import uvicorn

from app.api import create_app
from app.data.database import Base, engine
from app.data.seed import seed
from app.utils.settings import SEED_DEMO_DATA
from app.utils.logging import get_logger

# import wszystkich modeli przed create_all
from app.data import models  # noqa: F401

logger = get_logger(__name__)

logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")

try:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise

if SEED_DEMO_DATA:
    seed()


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
