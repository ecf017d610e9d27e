from fastapi import FastAPI
from loguru import logger

from workout_match.config.settings import settings
from workout_match.core.logger import setup_logger_from_settings
from workout_match.workouts.routes import router as workouts_router

# Initialize logger
setup_logger_from_settings(settings)

app = FastAPI(
    title="workout-match",
    description="Workout plan flattening and plan-vs-actual matching",
)

app.include_router(workouts_router)

logger.info("Workout match API ready")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
