"""
FastAPI application for the fertilizer recommendation service.
"""
import os
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fertiadvisor import __version__
from fertiadvisor.routers import recommendations

FERTIADVISOR_LOG_LEVEL = os.environ.get("FERTIADVISOR_LOG_LEVEL", "INFO")
FERTIADVISOR_CORS_ORIGINS = os.environ.get("FERTIADVISOR_CORS_ORIGINS", "*")

logging.basicConfig(
    level=FERTIADVISOR_LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Fertilizer Recommendation API", version=__version__)

    origins = [origin.strip() for origin in FERTIADVISOR_CORS_ORIGINS.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(recommendations.router)

    @app.get("/health")
    def health_check():
        return {"status": "OK", "service": "fertiadvisor", "version": __version__}

    logger.info(f"Fertilizer recommendation API {__version__} ready")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
