from assessment.db.database import Base, engine
from assessment.models import lesson, quiz, progress
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)
logger.info("Tables created successfully.")
