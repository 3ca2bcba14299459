import json
import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

import database
from ai_designer import AIDesigner, AIDesignerError
from busy import BusyError
from colors import reserved_black_conflict
from config import get_settings
from customizer_store import CustomizerSession
from designs import delete_design, get_design, list_designs, save_design
from render import render_sneaker_svg
from schemas import (
    AIDesignerBody,
    ConfigurationUpdate,
    Product,
    SaveDesignBody,
    SelectProductBody,
    SneakerConfiguration,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="SneakPeak API", version="0.2.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.session = CustomizerSession()


# Error responses all use {"error": ...} so the browser can show them as-is

@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)


@app.exception_handler(AIDesignerError)
async def ai_designer_error(request: Request, exc: AIDesignerError):
    return JSONResponse({"error": str(exc), "category": exc.category}, status_code=exc.status_code)


@app.exception_handler(BusyError)
async def busy_error(request: Request, exc: BusyError):
    return JSONResponse({"error": str(exc)}, status_code=409)


@app.exception_handler(database.DatabaseUnavailable)
@app.exception_handler(PyMongoError)
async def storage_error(request: Request, exc: Exception):
    logger.error("Design store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": "Could not reach the design store. Please try again."}, status_code=503)


# Dependencies

def get_session(request: Request) -> CustomizerSession:
    return request.app.state.session


def get_ai_designer() -> AIDesigner:
    settings = get_settings()
    return AIDesigner(settings.gemini_api_key, settings.gemini_model, settings.gemini_base_url)


# Utilities

def load_catalog() -> List[Product]:
    path = get_settings().catalog_path
    try:
        with open(path, "r") as f:
            return [Product(**p) for p in json.load(f)]
    except (OSError, ValueError):
        logger.exception("Could not load product catalog from %s", path)
        return []


def find_product(product_id: Optional[str]) -> Optional[Product]:
    for p in load_catalog():
        if p.id == product_id:
            return p
    return None


# Routes
@app.get("/")
def root():
    return {"name": "SneakPeak API", "status": "ok"}


@app.get("/api/products")
def products():
    return [p.model_dump() for p in load_catalog()]


@app.get("/api/products/{product_id}")
def product_detail(product_id: str):
    product = find_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product.model_dump()


# Customizer state

@app.get("/api/customizer")
def customizer_state(session: CustomizerSession = Depends(get_session)):
    return session.status()


@app.patch("/api/customizer/config")
def update_config(body: ConfigurationUpdate, session: CustomizerSession = Depends(get_session)):
    update = body.model_dump(exclude_unset=True, exclude_none=True)
    conflict = reserved_black_conflict(session.store.configuration.model_dump(), update)
    if conflict:
        raise HTTPException(status_code=422, detail=f"Invalid combination: {conflict}")
    session.store.merge_update(update)
    return session.status()


@app.put("/api/customizer/config")
def replace_config(body: SneakerConfiguration, session: CustomizerSession = Depends(get_session)):
    session.store.replace_all(body)
    return session.status()


@app.post("/api/customizer/product")
def select_product(body: SelectProductBody, session: CustomizerSession = Depends(get_session)):
    product = find_product(body.productId)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    session.store.select_product(product.id, product.name, product.base_price, product.default_config)
    return session.status()


@app.post("/api/customizer/reset")
def reset_config(session: CustomizerSession = Depends(get_session)):
    session.store.reset()
    return session.status()


@app.get("/api/customizer/preview.svg")
def customizer_preview(session: CustomizerSession = Depends(get_session)):
    return Response(render_sneaker_svg(session.store.configuration), media_type="image/svg+xml")


@app.post("/api/preview")
def preview(body: SneakerConfiguration):
    return Response(render_sneaker_svg(body), media_type="image/svg+xml")


# AI designer

def _clean_prompt(body: AIDesignerBody) -> str:
    prompt = body.prompt.strip()
    if not prompt:
        raise HTTPException(status_code=400, detail="Prompt cannot be empty")
    return prompt


@app.post("/api/ai-designer")
def ai_designer(body: AIDesignerBody, designer: AIDesigner = Depends(get_ai_designer)):
    return {"colors": designer.suggest(_clean_prompt(body))}


@app.post("/api/customizer/ai")
def customizer_ai(body: AIDesignerBody,
                  session: CustomizerSession = Depends(get_session),
                  designer: AIDesigner = Depends(get_ai_designer)):
    prompt = _clean_prompt(body)
    with session.ai.hold():
        colors = designer.suggest(prompt)
        session.store.merge_update(colors)
    state = session.status()
    state["colors"] = colors
    return state


# Saved designs

@app.post("/api/designs")
def create_design(body: SaveDesignBody, session: CustomizerSession = Depends(get_session)):
    with session.save.hold():
        snapshot = session.store.configuration
        product_id = session.store.product_id
        if not product_id:
            catalog = load_catalog()
            if not catalog:
                raise HTTPException(status_code=409, detail="No product available to save against")
            product_id = catalog[0].id
        inserted_id = save_design(body.userId, product_id, body.name, snapshot, body.tags)
    return {"id": inserted_id}


@app.get("/api/designs")
def designs(userId: str = Query(..., min_length=1), q: Optional[str] = None):
    return list_designs(userId, q)


@app.post("/api/designs/{design_id}/load")
def load_design(design_id: str, userId: str = Query(..., min_length=1),
                session: CustomizerSession = Depends(get_session)):
    with session.load.hold():
        design = get_design(design_id, userId)
        if design is None:
            raise HTTPException(status_code=404, detail="Design not found")
        try:
            config = SneakerConfiguration.model_validate(design.get("configuration"))
        except ValidationError:
            logger.error("Saved design %s has an invalid configuration", design_id)
            raise HTTPException(status_code=500, detail="Saved design has an invalid configuration")
        session.store.replace_all(config)
        product = find_product(design.get("productId"))
        if product is not None:
            session.store.select_product(product.id, product.name, product.base_price, config)
    return session.status()


@app.delete("/api/designs/{design_id}")
def remove_design(design_id: str, userId: str = Query(..., min_length=1),
                  session: CustomizerSession = Depends(get_session)):
    with session.delete.hold():
        if not delete_design(design_id, userId):
            raise HTTPException(status_code=404, detail="Design not found")
    return {"id": design_id, "deleted": True}


# Health
@app.get("/test")
def test_database():
    settings = get_settings()
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "collections": [],
        "database_url": "✅ Set" if settings.database_url else "❌ Not Set",
        "database_name": "✅ Set" if settings.database_name else "❌ Not Set",
        "gemini_api_key": "✅ Set" if settings.gemini_api_key else "❌ Not Set",
        "catalog_products": len(load_catalog()),
    }
    if database.db is None:
        return response
    try:
        response["collections"] = database.db.list_collection_names()[:10]
        response["database"] = "✅ Connected & Working"
    except PyMongoError as e:
        response["database"] = f"⚠️  Connected but Error: {str(e)[:50]}"
    return response


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
