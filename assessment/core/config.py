import os
from dotenv import load_dotenv

load_dotenv()

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    raise ValueError("SECRET_KEY is not set! Set it in environment variables.")

ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

DEFAULT_PASSING_SCORE = int(os.getenv("DEFAULT_PASSING_SCORE", "60"))
ATTEMPT_RECORD_MAX_RETRIES = int(os.getenv("ATTEMPT_RECORD_MAX_RETRIES", "5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
