from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import configure_logging
from app.api.sessions import router as sessions_router
from app.api.local import router as local_router
from app.dependencies import shutdown_session_registry

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield
    await shutdown_session_registry()

app = FastAPI(
    title=settings.service_name,
    lifespan=lifespan
)

# CORS middleware - allow the web front-end to call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sessions_router)

if settings.transport_backend == "local":
    app.include_router(local_router, prefix="/local")

@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
