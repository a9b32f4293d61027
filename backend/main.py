# backend/main.py
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from config import settings
from database import init_db
from utils.blob_store import BlobStore
from utils.errors import ApiError, ValidationError

# Routers
from routes.category import router as category_router
from routes.product import router as product_router
from routes.wishlist import router as wishlist_router
from routes.review import router as review_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One storage client per process, handed to routes through get_blob_store
    init_db()
    app.state.blob_store = BlobStore.from_settings(settings)
    try:
        yield
    finally:
        app.state.blob_store.close()


app = FastAPI(title="Baazar Catalog API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- ERROR ENVELOPES ----
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    body = {"success": False, "error": exc.message}
    if isinstance(exc, ValidationError) and exc.missing:
        body["missing"] = exc.missing
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"success": False, "error": "; ".join(parts)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})


# Router registration
api = APIRouter(prefix="/api")


@api.get("")
def api_status():
    return {"message": "Api route is working"}


api.include_router(category_router)
api.include_router(product_router)
api.include_router(wishlist_router)
api.include_router(review_router)
app.include_router(api)


@app.get("/")
def read_root():
    return {"message": "Baazar Catalog API is running"}
