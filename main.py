from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import httpx
import logging

from config.settings import Settings, get_settings
from core.errors import MarketplaceError
from core.pinning import PinningClient
from db.session import check_connection, create_tables, make_engine, make_session_factory
from middleware.logging import LoggingMiddleware
from schemas.response import error_response

# Import API routers
from api.users import router as users_router
from api.nft import router as nft_router
from api.payment import router as payment_router

logger = logging.getLogger(__name__)

def create_app(settings: Optional[Settings] = None, http_client: Optional[httpx.Client] = None) -> FastAPI:
    """Build the application; resources are opened in lifespan and closed on shutdown"""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting PixelPi API...")

        engine = make_engine(settings.DATABASE_URL, echo=settings.LOG_LEVEL == "DEBUG")
        app.state.engine = engine
        app.state.session_factory = make_session_factory(engine)

        # A store that is down at startup is reported by /health, not fatal
        try:
            create_tables(engine)
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error(f"Database initialization failed: {e}")

        app.state.pinning = PinningClient.from_settings(settings, client=http_client)

        logger.info("Startup complete")
        yield

        logger.info("Shutting down PixelPi API...")
        if app.state.pinning is not None:
            app.state.pinning.close()
        engine.dispose()

    app = FastAPI(
        title="PixelPi API",
        description="NFT marketplace backend: users, IPFS-backed minting and mock Pi payments",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MarketplaceError)
    async def marketplace_exception_handler(request: Request, exc: MarketplaceError):
        """Handle domain errors raised by the service layer"""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message, {"errors": exc.errors} if len(exc.errors) > 1 else None),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions"""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.detail if isinstance(exc.detail, str) else str(exc.detail)),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies are reported as 400 with the offending fields"""
        errors = [f"{'.'.join(str(p) for p in e['loc'] if p != 'body')}: {e['msg']}" for e in exc.errors()]
        return JSONResponse(
            status_code=400,
            content=error_response("Invalid request", {"errors": errors}),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_response("Internal server error"),
        )

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Root endpoint"""
        return "PixelPi Backend is Working!"

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint"""
        db_ok = check_connection(request.app.state.engine)
        return {
            "status": "OK",
            "message": "PixelPi API is running!",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "connected" if db_ok else "disconnected",
            "pinata": "configured" if request.app.state.pinning is not None else "not configured",
        }

    @app.get("/api/test")
    async def api_test():
        return {"success": True, "message": "Backend working perfectly!"}

    # Include routers
    app.include_router(users_router, prefix="/api")
    app.include_router(nft_router, prefix="/api")
    app.include_router(payment_router, prefix="/api")

    return app

logging.basicConfig(
    level=getattr(logging, get_settings().LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
