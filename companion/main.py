import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from companion.api import routes_preprocess, routes_system

logger = logging.getLogger(__name__)

app = FastAPI(title="Companion Preprocessor", version="0.1")

# CORS (the chat front end is served from another origin)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"])


# Startup Event
@app.on_event("startup")
def on_startup():
    from companion.core.logger_stream import setup_log_capture
    setup_log_capture()
    _prewarm_preprocessor()


def _prewarm_preprocessor():
    """Build the tables and the shared preprocessor now so a bad table file stops startup."""
    from companion.preprocess.pipeline import get_preprocessor

    preprocessor = get_preprocessor()
    preprocessor.process("warmup")
    logger.info(
        f"[Startup] Preprocessor ready: {len(preprocessor.tables.slang)} slang terms, "
        f"{len(preprocessor.tables.clarifications)} clarification triggers."
    )


# Include Routers
app.include_router(routes_system.router)
app.include_router(routes_preprocess.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=os.environ.get("COMPANION_HOST", "0.0.0.0"),
        port=int(os.environ.get("COMPANION_PORT", 8000)),
    )
