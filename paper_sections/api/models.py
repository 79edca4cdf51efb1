# paper_sections/api/models.py

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field, field_validator


class ProcessResponse(BaseModel):
    """
    Result of running a PDF through GROBID and the section extractor.
    """
    message: str = Field(..., description="Human-readable status message.")
    sections: Dict[str, str] = Field(
        default_factory=dict,
        description="Section name -> cleaned text. Missing sections are omitted.",
    )


class LlmRequest(BaseModel):
    """
    A user prompt plus the document sections it should be answered over.
    """
    prompt: str = Field(..., min_length=1, description="Instruction for the model.")
    sections: Dict[str, str] = Field(
        ...,
        description="Selected sections, name -> text, in the order to present them.",
    )

    @field_validator("sections")
    @classmethod
    def _sections_not_empty(cls, value: Dict[str, str]) -> Dict[str, str]:
        if not value:
            raise ValueError("at least one section is required")
        return value


class LlmResponse(BaseModel):
    result: str = Field(..., description="Text generated by the model.")
