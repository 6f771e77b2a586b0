from fastapi import FastAPI

from app.core.errors import register_exception_handlers
from app.core.logging_config import configure_logging
from app.db.init_db import init_db
from app.api.routes.auth import router as auth_router
from app.api.routes.me import router as me_router
from app.api.routes.statistics import router as statistics_router

configure_logging()

app = FastAPI(title="Goalkeeper Statistics")
register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(me_router)
app.include_router(statistics_router)


@app.on_event("startup")
def on_startup():
    init_db()


@app.get("/health")
def health():
    return {"ok": True}
