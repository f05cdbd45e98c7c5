import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.errors import register_exception_handlers
from .routers import auth, channels, videos, comments, health

logging.basicConfig(
    stream=sys.stdout, level=logging.DEBUG if settings.debug_logs else logging.INFO
)

origins = [
    settings.API_ORIGIN,
    "http://localhost:3000",
    "http://localhost:5173",
]


app = FastAPI(title="TubeShare API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(channels.router)
app.include_router(videos.router)
app.include_router(comments.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"message": "TubeShare API"}
