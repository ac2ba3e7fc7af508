from typing import List
from assessment.schemas.quiz import CamelModel


class QuestionStat(CamelModel):
    question_id: str
    correct_count: int = 0
    attempt_count: int = 0
    correct_percentage: float = 0.0


class QuizAnalytics(CamelModel):
    quiz_id: str
    total_attempts: int = 0
    unique_students: int = 0
    average_score: float = 0.0
    pass_rate: float = 0.0
    question_stats: List[QuestionStat] = []
