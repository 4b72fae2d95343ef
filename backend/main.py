import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config import FRONTEND_URL, LOG_LEVEL
from routers import sounds

logging.basicConfig(level=LOG_LEVEL)

app = FastAPI(title="Briefing Sound Selection API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sounds.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
