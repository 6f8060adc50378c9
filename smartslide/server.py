"""
Main FastAPI server module for SmartSlide.

Initializes the FastAPI application, wires the routers, CORS middleware,
rate limiting and the conversion error handler, and runs uvicorn when
executed directly.
"""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from smartslide import __version__
from smartslide.configs.config import config
from smartslide.configs.logging_config import setup_logging
from smartslide.core.rate_limit import add_rate_limiting
from smartslide.document.errors import ConversionError
from smartslide.routes.analyze_routes import router as analyze_router
from smartslide.routes.convert_routes import router as convert_router
from smartslide.routes.health_routes import router as health_router

app = FastAPI(title="SmartSlide Reviewer API", version=__version__)


@app.on_event("startup")
async def startup_event() -> None:
    """Initialize logging configuration on application startup"""
    log_file = config.log_file
    setup_logging(
        config.log_level,
        log_file,
        enable_file_logging=log_file is not None,
        log_dir=config.log_dir,
        component="api",
    )


@app.exception_handler(ConversionError)
async def conversion_error_handler(
    request: Request, exc: ConversionError
) -> JSONResponse:
    logger.warning(f"Conversion failed for {request.url.path}: {exc.kind.value}")
    return JSONResponse(status_code=422, content=exc.to_dict())


add_rate_limiting(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(convert_router)
app.include_router(analyze_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint that returns a welcome message"""
    return {"message": "SmartSlide Reviewer API"}


def main() -> None:
    uvicorn.run(app, host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
