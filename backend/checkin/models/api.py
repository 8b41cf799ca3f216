# /checkin/models/api.py

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, model_validator

from checkin.models.session import Attachment, SessionSnapshot

# This file contains Pydantic models that define the structure of data for
# API requests and responses, ensuring type safety and validation.


class APIResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Dict] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    version: str


class StartSessionRequest(BaseModel):
    flow_id: Optional[str] = Field(default=None, description="Run this flow")
    owner_id: Optional[str] = Field(default=None, description="Run the owner's active flow")
    recipient_name: str = Field(..., min_length=1, max_length=120)

    @model_validator(mode="after")
    def flow_or_owner(self):
        if not self.flow_id and not self.owner_id:
            raise ValueError("Either flow_id or owner_id is required")
        return self


class AnswerRequest(BaseModel):
    text: str = Field(default="", max_length=4000)


class MultiInputRequest(BaseModel):
    values: Dict[str, str] = Field(default_factory=dict)


class CheckinSubmission(BaseModel):
    """What a finished conversation hands to the practice."""
    session_id: str
    flow_id: Optional[str] = None
    recipient_name: str
    answers: Dict[str, str] = Field(default_factory=dict)
    attachments: List[Attachment] = Field(default_factory=list)
    submitted_at: datetime = Field(default_factory=datetime.utcnow)


class RestoreSessionRequest(BaseModel):
    flow_id: str
    recipient_name: str = Field(..., min_length=1, max_length=120)
    snapshot: SessionSnapshot


class CreateFlowRequest(BaseModel):
    owner_id: str = Field(..., min_length=1)
    name: Optional[str] = Field(default=None, max_length=200)
    from_template: bool = Field(default=True, description="Start from the default check-in script")


class UpdateFlowRequest(BaseModel):
    """Whole-field replacements; omitted fields keep their stored value."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    steps: Optional[List[Dict[str, Any]]] = Field(default=None, description="Steps as authored, camelCase keys")
    theme: Optional[Dict[str, str]] = None
    header_image_url: Optional[str] = None


class ValidateFlowRequest(BaseModel):
    steps: List[Dict[str, Any]] = Field(default_factory=list)
