# In main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.trustedhost import TrustedHostMiddleware

from google.cloud import storage

import config
import database
from routers import comments, posts
from paths import StaticPaths
from services.content_queries import list_post_slugs

logger = logging.getLogger('uvicorn.error')


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup: Initializing resources...")
    app.state.mongo_client = None
    app.state.db = None
    try:
        app.state.mongo_client = database.create_client()
        app.state.db = app.state.mongo_client[config.DATABASE_NAME]
        logger.info(f"MongoDB client initialized for database '{config.DATABASE_NAME}'.")
    except Exception as e:
        logger.error(f"Failed to initialize MongoDB client: {e}")

    try:
        app.state.gcs_client = storage.Client(project=config.GCP_PROJECT_ID)
        logger.info("Google Cloud Storage client initialized.")
    except Exception as e:
        logger.error(f"Failed to initialize GCS client: {e}")
        app.state.gcs_client = None

    app.state.paths = StaticPaths(fallback=config.PATHS_FALLBACK)
    if app.state.db is not None:
        try:
            app.state.paths.replace(await list_post_slugs(app.state.db))
        except Exception as e:
            # Every slug then goes through the fallback policy
            logger.error(f"Failed to enumerate post paths at startup: {e}")

    yield
    logger.info("Application shutdown: Cleaning up resources...")
    if app.state.mongo_client is not None:
        try:
            await app.state.mongo_client.close()
            logger.info("MongoDB client closed.")
        except Exception as e:
            logger.error(f"Error closing MongoDB client: {e}")


app = FastAPI(title="medium-blog", lifespan=lifespan)
app.include_router(posts.router)
app.include_router(comments.router)

app.add_middleware(
    TrustedHostMiddleware, allowed_hosts=config.ALLOWED_HOSTS
)
