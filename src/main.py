from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import get_settings
from src.routes.results import router as results_router
from src.routes.upload import router as upload_router

app = FastAPI()

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type"],
    max_age=600,
)

app.include_router(upload_router)
app.include_router(results_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
