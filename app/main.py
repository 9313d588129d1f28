import logging
import os
from contextlib import asynccontextmanager
from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from bakers_price.core.ai_import import RETRY_MESSAGE, IngredientImportError
from bakers_price.core.recipes import EntryNotFoundError, RecipeNotFoundError
from bakers_price.db.database import init_db
from app.routers import ai_import, ingredients, packaging, recipes, settings, state, units

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("bakers_price.app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Baker's Price", lifespan=lifespan)


@app.exception_handler(RecipeNotFoundError)
@app.exception_handler(EntryNotFoundError)
async def not_found_handler(request: Request, exc: LookupError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(IngredientImportError)
async def import_failed_handler(request: Request, exc: IngredientImportError):
    logger.warning("AI import failed for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": RETRY_MESSAGE, "error": str(exc)})


@app.get("/")
async def root():
    return RedirectResponse(url="/recipes", status_code=302)


app.include_router(recipes.router)
app.include_router(ingredients.router)
app.include_router(packaging.router)
app.include_router(ai_import.router)
app.include_router(state.router)
app.include_router(settings.router)
app.include_router(units.router)
