# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from sweet_shop.core.config import Settings, settings as default_settings
from sweet_shop.db import create_client, get_database
from sweet_shop.handlers import register_exception_handlers
from sweet_shop.routers import auth, sweets
from sweet_shop.services.accounts import AccountService
from sweet_shop.services.catalog import CatalogService
from sweet_shop.services.inventory import InventoryService
from sweet_shop.services.locks import KeyedLock
from sweet_shop.services.management import ManagementService
from sweet_shop.stores.sweets import InMemorySweetStore, MongoSweetStore
from sweet_shop.stores.users import InMemoryUserStore, MongoUserStore

logging.basicConfig(
    level=getattr(logging, default_settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("sweet-shop")

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = None
        if settings.store_backend == "mongo":
            client = create_client(settings)
            db = get_database(client, settings)
            app.state.db = db
            sweet_store, user_store = MongoSweetStore(db), MongoUserStore(db)
            await user_store.ensure_indexes()
        else:
            app.state.db = None
            sweet_store, user_store = InMemorySweetStore(), InMemoryUserStore()
        logger.info("Using %s store backend", settings.store_backend)

        # purchase/restock and update/delete must serialise on the same sweet
        locks = KeyedLock()
        app.state.settings = settings
        app.state.sweet_store = sweet_store
        app.state.user_store = user_store
        app.state.inventory = InventoryService(sweet_store, locks)
        app.state.management = ManagementService(sweet_store, locks)
        app.state.catalog = CatalogService(sweet_store)
        app.state.accounts = AccountService(user_store, settings)

        if settings.admin_username and settings.admin_password:
            await app.state.accounts.ensure_admin(settings.admin_username, settings.admin_password)

        yield

        if client is not None:
            client.close()

    app = FastAPI(title="Sweet Shop Inventory API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(auth.router)
    app.include_router(sweets.router)

    @app.get("/ping")
    async def ping(request: Request):
        db = request.app.state.db
        if db is None:
            return {"store_ok": True}
        res = await db.command("ping")
        return {"store_ok": bool(res.get("ok"))}

    return app

app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
