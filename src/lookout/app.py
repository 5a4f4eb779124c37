from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api.routes import router as api_router
from .telemetry import init_telemetry, shutdown_telemetry


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    yield
    shutdown_telemetry()


def create_app() -> FastAPI:
    app = FastAPI(title="Lookout API", version="0.1.0", lifespan=lifespan)
    app.include_router(api_router)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    init_telemetry(app)
    return app


app = create_app()
