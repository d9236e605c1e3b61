from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import get_settings
from .errors import ConfigError, FormatError, ServiceError
from .handlers import routers
from .logging_config import configure_logging


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging(log_level=get_settings().log_level)
    yield


app = FastAPI(title="Clockify NLP time entry service", lifespan=lifespan)

for router in routers:
    app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}


# --- Error mapping --------------------------------------------------------
@app.exception_handler(ConfigError)
async def config_error_handler(_request: Request, exc: ConfigError):
    return JSONResponse(status_code=500, content={"error": "config", "detail": str(exc)})


@app.exception_handler(ServiceError)
async def service_error_handler(_request: Request, exc: ServiceError):
    return JSONResponse(
        status_code=502,
        content={
            "error":  "service",
            "detail": str(exc),
            "call":   exc.call,
            "status": exc.status,
            "body":   exc.body,
        },
    )


@app.exception_handler(FormatError)
async def format_error_handler(_request: Request, exc: FormatError):
    return JSONResponse(
        status_code=422,
        content={"error": "format", "detail": exc.message, "content": exc.content},
    )


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
