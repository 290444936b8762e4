import asyncio
import contextlib
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import create_db_and_tables
from digest.scheduler import build_digest_job, parse_run_at, run_digest_scheduler
from routes import activities, auth, notes, tasks
from utils.log import get_logger

# Load environment variables
load_dotenv()

logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Tasks API",
    description="Personal task tracker with activity logs, notes and a daily digest",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS configuration
cors_origins = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api", tags=["auth"])
app.include_router(tasks.router, prefix="/api", tags=["tasks"])
app.include_router(activities.router, prefix="/api", tags=["activities"])
app.include_router(notes.router, prefix="/api", tags=["notes"])


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": message}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed input with 400, naming only the offending fields"""
    logger.warning("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    message = "Invalid request"
    if fields:
        message += ": " + ", ".join(fields)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


@app.on_event("startup")
async def on_startup():
    """Create database tables and start the digest scheduler if enabled"""
    create_db_and_tables()

    if os.getenv("DIGEST_SCHEDULER_ENABLED", "false").lower() == "true":
        run_at = parse_run_at(os.getenv("DIGEST_TIME", "08:30"))
        app.state.digest_task = asyncio.create_task(
            run_digest_scheduler(build_digest_job(), at=run_at)
        )
        logger.info("Digest scheduler started")


@app.on_event("shutdown")
async def on_shutdown():
    """Stop the digest scheduler"""
    digest_task = getattr(app.state, "digest_task", None)
    if digest_task is not None:
        digest_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await digest_task
        app.state.digest_task = None
        logger.info("Digest scheduler stopped")


@app.get("/", response_class=PlainTextResponse)
def read_root():
    """Root endpoint"""
    return "Tasks API is running"


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


def run():
    """Console entry point: serve the API with uvicorn"""
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
    )


if __name__ == "__main__":
    run()
