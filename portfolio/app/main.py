"""Main FastAPI application module."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from portfolio import __version__
from portfolio.core.config import get_settings
from portfolio.core.database import init_database
from portfolio.core.logging import setup_logging
from portfolio.core.monitoring import get_all_monitors

from .errors import register_exception_handlers
from .routers import auth, pages, profile, projects, public, resume, skills, wizard

# Initialize logging
logger = setup_logging('api')

settings = get_settings()

app = FastAPI(
    title="Portfolio Builder API",
    description="""
    REST API for the Portfolio Builder that provides endpoints for:

    * Sign-up, sign-in and sessions
    * Profile editing and profile pictures
    * Projects and skills
    * A step-by-step setup wizard
    * Resume preview and HTML export
    * Public, shareable portfolio pages

    ## Authentication

    Editing endpoints require a session token. Include it in the
    Authorization header:
    ```
    Authorization: Bearer <your_token>
    ```
    Page routes also accept the session cookie set at sign-in.
    """,
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(pages.router, tags=["pages"])
app.include_router(public.router, tags=["portfolio"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(profile.router, prefix="/api/profile", tags=["profile"])
app.include_router(projects.router, prefix="/api/projects", tags=["projects"])
app.include_router(skills.router, prefix="/api/skills", tags=["skills"])
app.include_router(wizard.router, prefix="/api/wizard", tags=["wizard"])
app.include_router(resume.router, prefix="/api/resume", tags=["resume"])


def custom_openapi():
    """Generate custom OpenAPI schema with the bearer security scheme."""
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "bearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
    }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


@app.on_event("startup")
async def startup_event():
    """Initialize the database on startup."""
    try:
        init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Error during startup: {str(e)}")
        raise


@app.get("/api/health")
async def health_check():
    """Health check endpoint with operation counters."""
    return {
        "status": "healthy",
        "service": "Portfolio Builder API",
        "version": __version__,
        "monitors": get_all_monitors(),
    }
