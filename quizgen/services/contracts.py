from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

# ---------- Inbound payloads ----------

class GenerateQuestionsBody(BaseModel):
    questionType: Any = None  # anything but "mcq" means descriptive
    numberOfQuestions: StrictInt = Field(gt=0)
    topic: str
    fileUrl: Optional[str] = None

    @field_validator("topic", mode="before")
    @classmethod
    def _scalar_topic(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

class AnalysisRecord(BaseModel):
    """One attempted question. Fields are passed to the model untouched."""
    questionId: Any = None
    questionText: Any = None
    optedAnswer: Any = None
    correctAnswer: Any = None
    options: Any = None

# ---------- Internal normalized models ----------

class QuestionKind(str, Enum):
    MCQ = "mcq"
    DESCRIPTIVE = "descriptive"

    @classmethod
    def from_question_type(cls, value: Any) -> "QuestionKind":
        return cls.MCQ if value == "mcq" else cls.DESCRIPTIVE

class QuestionRequest(BaseModel):
    kind: QuestionKind
    count: int = Field(gt=0)
    topic: str
    source_text: Optional[str] = None

class MCQItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    question: str
    opt1: str
    opt2: str
    opt3: str
    opt4: str
    correctAnswer: int = Field(ge=1, le=4)

    @property
    def options(self) -> List[str]:
        return [self.opt1, self.opt2, self.opt3, self.opt4]

    @property
    def correct_option_index(self) -> int:
        return self.correctAnswer

class DescriptiveItem(BaseModel):
    question: str

    def to_row(self) -> Dict[str, Any]:
        return {"Question": self.question}

class GeneratedQuestions(BaseModel):
    mcq: List[Dict[str, Any]] = Field(default_factory=list)
    descriptive: List[DescriptiveItem] = Field(default_factory=list)

# ---------- Analysis report shape ----------

class TopicNote(BaseModel):
    topic: str
    details: str

class QuestionSuggestion(BaseModel):
    questionId: str
    suggestion: str

class PointNote(BaseModel):
    point: str
    details: str

class Recommendation(BaseModel):
    recommendation: str
    details: str

class AnalysisReport(BaseModel):
    overallAccuracy: str
    bestPerformingTopics: List[TopicNote] = Field(default_factory=list)
    improvementNeededTopics: List[TopicNote] = Field(default_factory=list)
    specificSuggestions: List[QuestionSuggestion] = Field(default_factory=list)
    strengths: List[PointNote] = Field(default_factory=list)
    areasOfAppreciation: List[PointNote] = Field(default_factory=list)
    furtherRecommendations: List[Recommendation] = Field(default_factory=list)

    @classmethod
    def shape(cls) -> Dict[str, Any]:
        """Skeleton of the report with every leaf replaced by "STRING"."""
        def skeleton(model: type[BaseModel]) -> Dict[str, Any]:
            out: Dict[str, Any] = {}
            for name, field in model.model_fields.items():
                item_type = getattr(field.annotation, "__args__", (None,))[0]
                if isinstance(item_type, type) and issubclass(item_type, BaseModel):
                    out[name] = [skeleton(item_type)]
                else:
                    out[name] = "STRING"
            return out
        return skeleton(cls)
