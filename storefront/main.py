# storefront/main.py
import uvicorn
from fastapi import FastAPI

from storefront.api import include_routers
from storefront.data.database import Base, engine
from storefront.utils.logging import get_logger

# import all models before create_all
import storefront.data.models  # noqa: F401

logger = get_logger(__name__)


def init_db(bind=engine):
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=bind)
        logger.info("Database tables created")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise


def create_app(create_tables: bool = True) -> FastAPI:
    if create_tables:
        init_db()

    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
    )
    return include_routers(app)


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
