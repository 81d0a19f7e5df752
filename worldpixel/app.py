# worldpixel/app.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from worldpixel.conf import registry as pixel_registry
from worldpixel.routes import pixel_router
from worldpixel.schemas import field_errors
from worldpixel.store.pixel_store import PixelStore

logger = logging.getLogger("app")
logger.setLevel(logging.INFO)


def create_app(store: Optional[PixelStore] = None, seed: bool = True) -> FastAPI:
    """Create and configure FastAPI app.

    Args:
        store: Pixel store to serve. A fresh one is built when omitted,
            so every app (and every test) owns its own state.
        seed: Insert the sample city pixels on startup.
    """
    pixel_store = store if store is not None else PixelStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if seed:
            n = await pixel_store.seed(pixel_registry.get_sample_pixels())
            logger.info("startup: seeded %d sample pixels", n)
        else:
            logger.info("startup: no seed data")
        try:
            yield
        finally:
            count = await pixel_store.get_pixel_count()
            logger.info("shutdown: %d pixels in memory discarded", count)

    app = FastAPI(lifespan=lifespan)
    app.state.store = pixel_store

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        # FastAPI 기본값(422) 대신 400으로 통일
        logger.info("rejected %s %s: %d field error(s)",
            request.method, request.url.path, len(exc.errors())
        )
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request", "errors": field_errors(exc.errors())},
        )

    # 헬스체크(선택)
    @app.get("/ping")
    def ping():
        return {"msg": "pong"}

    # 픽셀 REST 라우터 등록
    app.include_router(pixel_router)
    return app


app = create_app()
