from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
import os
import logging
import uvicorn
from dotenv import load_dotenv

load_dotenv()

from db import Base, engine
from admission.models import CutoffRow  # noqa: F401  registers the table
from admission.routes import router as admission_router

logging.basicConfig(level=logging.INFO)
logging.info("App starting with DATABASE_URL")

app = FastAPI(
    title="JoSAA College Predictor",
    description="Cutoff projection and admission probability for seat allocation programs",
    version="1.0.0",
)

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Base.metadata.create_all(bind=engine)

app.include_router(admission_router)


@app.get("/", response_class=PlainTextResponse, tags=["meta"], summary="Liveness")
def root():
    return "College Predictor API is running!"


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
    )
