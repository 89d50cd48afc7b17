from fastapi import FastAPI
from contextlib import asynccontextmanager
from doubleminer.api.routes import router
from doubleminer.config import settings
from doubleminer.db.base import make_engine
from doubleminer.db.store import SQLStore
from doubleminer.logs import setup_logging
from doubleminer.services import Engine, build_engine
from doubleminer.sources import make_source


def default_engine() -> Engine:
    store = SQLStore(make_engine(settings.db_dsn), history_limit=settings.history_limit,
                     settlement_limit=settings.settlement_limit)
    store.init()
    source = make_source(settings.source, url=settings.tipminer_url)
    return build_engine(settings, store=store, source=source)


def create_app(engine: Engine | None = None, seed_history: int | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        eng = engine or default_engine()
        eng.load(seed_history=settings.seed_history if seed_history is None else seed_history)
        app.state.engine = eng
        yield

    app = FastAPI(title="Double Signal Miner", lifespan=lifespan)
    app.include_router(router)

    @app.get("/")
    def home():
        return {"ok": True, "app": "Double Signal Miner"}

    return app


app = create_app()
