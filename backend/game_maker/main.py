"""
Game Maker Backend - FastAPI Application Entry Point
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from game_maker import __version__
from game_maker.api import games, session

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Game Maker",
    description="Turns a child's favorite book into a playable arcade game",
    version=__version__,
)

# Configure CORS for the app frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session.router, prefix="/api/session", tags=["session"])
app.include_router(games.router, prefix="/api/games", tags=["games"])


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "ok", "name": "Game Maker", "version": __version__}
