from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.database import init_db
from core.errors import register_exception_handlers
from core.logging import setup_logging
from core.settings import get_settings
from modules.categories.router import router as categories_router
from modules.events.router import router as events_router
from modules.expenses.router import router as expenses_router
from modules.orders.router import router as orders_router
from modules.portion_controls.router import router as portion_controls_router
from modules.products.router import menu_router
from modules.products.router import router as products_router
from modules.reports.router import router as reports_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(categories_router)
    app.include_router(products_router)
    app.include_router(menu_router)
    app.include_router(portion_controls_router)
    app.include_router(orders_router)
    app.include_router(events_router)
    app.include_router(expenses_router)
    app.include_router(reports_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="127.0.0.1", port=8000)
