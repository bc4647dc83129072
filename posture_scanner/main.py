# posture_scanner/main.py
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import CORS_ORIGINS, LOG_LEVEL
from .router import router, check_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(
    title="Cookie & HSTS Posture Scanner",
    description="API to grade cookie attribute hygiene and HSTS policy strength of a domain.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(check_router)

if __name__ == "__main__":
    uvicorn.run("posture_scanner.main:app", host="0.0.0.0", port=8000, reload=True)
