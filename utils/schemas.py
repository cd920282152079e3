# utils/schemas.py
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field


class Exercise(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    targetArea: str
    instructions: str
    duration: str
    difficulty: Literal["Easy", "Medium", "Hard"]


class AnalysisResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    symmetryScore: float = Field(ge=0, le=100)
    achievabilityScore: float = Field(ge=0, le=100)
    analysisSummary: str
    keyDifferences: List[str]
    exercises: List[Exercise]


# Schema sent to the structured-output model. Kept as a plain dict so the
# backend can hand it to the SDK without depending on pydantic's JSON schema.
ANALYSIS_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "symmetryScore": {
            "type": "NUMBER",
            "description": "Current symmetry score out of 100",
        },
        "achievabilityScore": {
            "type": "NUMBER",
            "description": "Percentage of the ideal look achievable through natural exercise (0-100)",
        },
        "analysisSummary": {
            "type": "STRING",
            "description": "A brief paragraph analyzing the user's face structure vs the target.",
        },
        "keyDifferences": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "List of 3-5 key structural differences identified.",
        },
        "exercises": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "targetArea": {"type": "STRING"},
                    "instructions": {"type": "STRING"},
                    "duration": {"type": "STRING"},
                    "difficulty": {"type": "STRING", "enum": ["Easy", "Medium", "Hard"]},
                },
                "required": ["name", "targetArea", "instructions", "duration", "difficulty"],
            },
        },
    },
    "required": [
        "symmetryScore",
        "achievabilityScore",
        "analysisSummary",
        "keyDifferences",
        "exercises",
    ],
}
