# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from app.core.config import CORS_ORIGINS, LOG_LEVEL
from app.database.database import init_db

# Import routers
from app.routers.test_router import router as test_router
from app.routers.mistake_router import router as mistake_router

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

init_db()

app = FastAPI(title="Exam Prep Assessment API")

# CORS middleware configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(test_router)
app.include_router(mistake_router)

@app.get("/")
async def root():
    return {"message": "Exam Prep Assessment API is running"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=LOG_LEVEL.lower())
