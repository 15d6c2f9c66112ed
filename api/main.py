import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import db
from core.log import configure_logging
from core.settings import settings_from_env
from recipes.loader import RecipeLoader, load_on_startup
from recipes.repository import RecipeRepository, RecipeStoreError
from recipes.router import router as recipes_router
from recipes.service import RecipeQueryService

settings = settings_from_env()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool, store, loader and query service per process.
    pool = await db.init_pool()
    repository = RecipeRepository(pool)
    app.state.recipe_loader = RecipeLoader(repository, settings)
    app.state.recipe_queries = RecipeQueryService(repository)

    await load_on_startup(app.state.recipe_loader)
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Allow the frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recipes_router, tags=["recipes"])


@app.exception_handler(RecipeStoreError)
async def recipe_store_error_handler(request: Request, exc: RecipeStoreError) -> JSONResponse:
    logger.error("recipe_store_error path=%s error=%s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Recipe store unavailable."})


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "recipes api"}
