from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from bookstore.core.config import settings
from bookstore.core.errors import install_error_handlers
from bookstore.core.http_hardening import install_http_hardening
from bookstore.core.logging_config import setup_logging
from bookstore.api.router import router as api_router

setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

app = FastAPI(title=settings.APP_NAME, version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count", "X-Request-ID"],
)
install_http_hardening(app)
install_error_handlers(app)

app.include_router(api_router, prefix="/api")

@app.get("/", include_in_schema=False)
def landing():
    return JSONResponse({"service": settings.APP_NAME, "env": settings.APP_ENV, "status": "ok"})

@app.get("/health")
def health():
    return {"status": "ok"}
