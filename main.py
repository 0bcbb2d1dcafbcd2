import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
import uvicorn

from database import check_connection
from exceptions import ContractEngineError
from log_config import setup_logging
from routers import contracts_router, payments_router, pricing_router, reservations_router

# Load .env
load_dotenv()
setup_logging(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format_type=os.getenv("LOG_FORMAT", "standard"),
)

logger = logging.getLogger(__name__)

# App instance
app = FastAPI(title="Contract Payment Plan Engine")

# CORS
origins = [origin for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ContractEngineError)
async def engine_error_handler(request: Request, exc: ContractEngineError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(reservations_router)
app.include_router(contracts_router)
app.include_router(payments_router)
app.include_router(pricing_router)


# 500 Fallback Middleware
@app.middleware("http")
async def internal_error_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "internal_error", "message": "Internal server error"},
        )


@app.get("/api/health")
def health():
    return {"status": "ok", "database": check_connection()}


if __name__ == "__main__":
    port = int(os.getenv("PORT", 10000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
