from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import health, swap, tokens
from .config import settings
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

setup_logging()

DESCRIPTION = "Two-field token swap form with slippage-adjusted conversion and simulated settlement"

app = FastAPI(
    title="Swapform API",
    description=DESCRIPTION,
    version=__version__,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
    expose_headers=["x-request-id"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(tokens.router, tags=["Tokens"])
app.include_router(swap.router, tags=["Swap"])


@app.get("/")
async def root():
    """Service summary and entry points"""
    return {
        "name": app.title,
        "version": __version__,
        "description": DESCRIPTION,
        "endpoints": {
            "docs": "/docs",
            "health": "/healthz",
            "tokens": "/tokens",
            "sessions": "/swap/sessions",
        },
    }


def run() -> None:
    import uvicorn

    uvicorn.run(
        "swapform.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
