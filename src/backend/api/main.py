from __future__ import annotations

from fastapi import FastAPI

from api.invoices import router as invoices_router


def create_app() -> FastAPI:
    app = FastAPI(title="DGII invoice validation")
    app.include_router(invoices_router, prefix="/api/v1")
    return app


app = create_app()
