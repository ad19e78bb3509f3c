# models/analyze_model.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Union

Age = Union[int, float, str, None]


class AnalyzeBody(BaseModel):
    feeling: Optional[str] = None
    challenge: Optional[str] = None
    improve: Optional[str] = None
    checkCaption: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.feeling or self.challenge or self.improve or self.checkCaption)


class AnalyzeResponse(BaseModel):
    combinedStatement: str
    sentiment: str
    emotions: Dict[str, float]


class PatientRow(BaseModel):
    # CSV 헤더 이름 그대로 (대소문자/철자 정확히 일치해야 함)
    # 숫자로 들어온 텍스트 칸(Name=42 등)은 문자열로 받는다
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    name: Optional[str] = Field(None, alias="Name")
    age: Age = Field(None, alias="Age")
    sentiment: Optional[str] = Field(None, alias="Sentiment")
    type: Optional[str] = Field(None, alias="Type")
    country: Optional[str] = Field(None, alias="Country")
    city: Optional[str] = Field(None, alias="City")
    state: Optional[str] = Field(None, alias="State")
    gender: Optional[str] = Field(None, alias="Gender")


class PatientsBody(BaseModel):
    # 행 검증은 batch_processor.process_row 에서 행마다 따로
    csvData: Optional[List[Any]] = None


class RowResult(BaseModel):
    name: Optional[str] = None
    age: Age = None
    sentiment: str
    emotions: Optional[Dict[str, float]] = None
    type: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    gender: Optional[str] = None
