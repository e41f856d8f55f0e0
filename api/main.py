import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import db, settings
from core.errors import ApiError, ClientInputError, InternalFailure
from identity import router as identity_router
from moments import router as moments_router
from trips import router as trips_router
from uploads import router as uploads_router

logging.basicConfig(
    level=settings.log_level(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="OurMemories API", lifespan=lifespan)

# APP_ORIGIN unset (or "*") allows any origin.
_origin = settings.app_origin()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if _origin == "*" else [_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    err = ClientInputError("; ".join(problems) or "Invalid request.")
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    err = InternalFailure(str(exc) or type(exc).__name__)
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


app.include_router(identity_router.router, tags=["identity"])
app.include_router(trips_router.router, tags=["trips"])
app.include_router(moments_router.router, tags=["moments"])
app.include_router(uploads_router.router, tags=["uploads"])


@app.get("/health")
async def health():
    try:
        await db.ping()
    except Exception as e:
        return JSONResponse(status_code=500, content={"ok": False, "error": str(e)})
    return {"ok": True}


@app.get("/")
def root() -> dict:
    return {"message": "OurMemories API is running"}
