from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from catalogue.core.config import settings
from catalogue.core.middleware_correlation import CorrelationIdMiddleware
from catalogue.core.logging import get_logger, setup_logging
from catalogue.core.errors import register_exception_handlers
from catalogue.db.store import get_book_repository


# Routers
from fastapi import APIRouter
from catalogue.api.routes.books import router as books_router
from catalogue.api.routes.catalogue import router as catalogue_router


setup_logging(settings.LOG_LEVEL)

ENDPOINTS: list[tuple[str, str, str]] = [
    ("GET", "/books", "Get all books"),
    ("GET", "/books/:id", "Get book by ID"),
    ("POST", "/books", "Create new book"),
    ("PUT", "/books/:id", "Update book"),
    ("DELETE", "/books/:id", "Delete book"),
    ("GET", "/stats", "Get statistics"),
    ("GET", "/genres", "Get all genres"),
    ("GET", "/authors", "Get all authors"),
    ("POST", "/books/bulk", "Bulk add books"),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = get_logger(__name__)
    repo = app.dependency_overrides.get(get_book_repository, get_book_repository)()
    repo.initialize()
    logger.info("Data file: %s", repo.path)
    for method, path, summary in ENDPOINTS:
        logger.info("  %-6s %s%-13s - %s", method, settings.API_PREFIX, path, summary)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Book Catalogue API - list, filter and edit books stored in a JSON file.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middlewares
app.add_middleware(CorrelationIdMiddleware)

register_exception_handlers(app)

# Mount routers
api = APIRouter(prefix=settings.API_PREFIX)
api.include_router(books_router)
api.include_router(catalogue_router)
app.include_router(api)


# Root endpoint
@app.get("/api")
async def root():
    """API root endpoint with basic information."""
    return {
        "message": "Welcome to Book Catalogue API",
        "version": "1.0.0",
        "docs_url": "/docs",
        "endpoints": {
            f"{method} {settings.API_PREFIX}{path}": summary
            for method, path, summary in ENDPOINTS
        },
    }


# Static front end, served from "/" when the directory exists
if settings.STATIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")
