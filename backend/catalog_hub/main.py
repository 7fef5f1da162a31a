import logging

from fastapi import FastAPI

from catalog_hub.core.config import settings
from catalog_hub.core.middleware import apply_cors, register_exception_handlers
from catalog_hub.routes import health_router, v1_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Catalog Hub Backend")
logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")

apply_cors(app, settings)
register_exception_handlers(app)

app.include_router(health_router)
app.include_router(v1_router)
