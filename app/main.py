"""FastAPI application entrypoint."""

from dotenv import load_dotenv
from fastapi import FastAPI

# Load environment variables from .env file before settings-dependent imports
load_dotenv()

from app.adapters.inbound.http.error_handlers import register_exception_handlers  # noqa: E402
from app.adapters.inbound.http.routes import router  # noqa: E402

app = FastAPI(
    title="Car Catalog Search",
    description="Structured, faceted and natural-language car search using Clean Architecture",
    version="0.1.0",
)

register_exception_handlers(app)
app.include_router(router)
