"""Study guide and AI request models."""

from pydantic import BaseModel, ConfigDict, Field


class Flashcard(BaseModel):
    front: str
    back: str


class QuizQuestion(BaseModel):
    """A multiple-choice question; ``correctAnswer`` on the wire."""
    model_config = ConfigDict(populate_by_name=True)

    question: str
    options: list[str] = Field(default_factory=list)
    correct_answer: str = Field(alias="correctAnswer")


class StudyGuide(BaseModel):
    """AI-generated bundle of summary, flashcards and quiz questions for a topic."""
    model_config = ConfigDict(populate_by_name=True)

    summary: str
    flashcards: list[Flashcard] = Field(default_factory=list)
    quiz_questions: list[QuizQuestion] = Field(default_factory=list, alias="quizQuestions")


class SummarizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    max_length: int = Field(default=100, alias="maxLength")


class StudyGuideRequest(BaseModel):
    topic: str = ""
