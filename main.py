import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from assessment.core.config import CORS_ORIGINS, LOG_LEVEL
from assessment.core.exceptions import AssessmentError
from api.quiz import router as quiz_router
from api.progress import router as progress_router
from api.lesson import router as lesson_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Assessment API", description="Quizzes, attempts and analytics for the school learning platform")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(AssessmentError)
async def assessment_error_handler(request: Request, exc: AssessmentError):
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.get("/")
async def root():
    return {"message": "Welcome to the Assessment API"}

app.include_router(quiz_router)
app.include_router(progress_router)
app.include_router(lesson_router)
