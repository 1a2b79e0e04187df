import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from gallery.config import settings
from gallery.database import create_tables, async_session
from gallery.dependencies import verify_api_key
from gallery.seed import seed_data
from gallery.routers.admin import router as admin_router
from gallery.routers.auth import router as auth_router
from gallery.routers.likes import router as likes_router
from gallery.routers.photos import router as photos_router
from gallery.routers.tags import router as tags_router
from gallery.services.storage import PUBLIC_PATH_PREFIX
from gallery.utils.exceptions import register_exception_handlers

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    async with async_session() as session:
        await seed_data(session)
    yield


app = FastAPI(
    title="HandleMe Gallery API",
    description="Photo submissions, moderation queue and public gallery with likes",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

_api_key_dep = [Depends(verify_api_key)]

app.include_router(auth_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(photos_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(tags_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(admin_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(likes_router, prefix="/api")

# Public blob URLs resolve against the local bucket.
_bucket_dir = os.path.join(settings.storage_dir, settings.storage_bucket)
os.makedirs(_bucket_dir, exist_ok=True)
app.mount(
    f"{PUBLIC_PATH_PREFIX}/{settings.storage_bucket}",
    StaticFiles(directory=_bucket_dir),
    name="public-photos",
)


@app.get("/health")
async def health_check():
    return {"status": "success", "data": {"service": "handleme-gallery-api", "version": "0.1.0"}, "message": None}
