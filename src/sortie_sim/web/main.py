from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from sortie_sim.web.api.router import router as api_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Sortie Sim", lifespan=lifespan)
    app.include_router(api_router)
    return app


app = create_app()
