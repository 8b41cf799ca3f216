# /checkin/models/flow.py

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class StepType(str, Enum):
    MESSAGE = "message"
    TEXT = "text"
    NUMBER = "number"
    CHOICE = "choice"
    FILE = "file"
    MULTI_INPUT = "multi-input"


class ImagePosition(str, Enum):
    ABOVE = "above"
    BELOW = "below"


class Condition(BaseModel):
    """A (field, operator, value) triple evaluated against collected answers."""
    field: str = Field(..., description="Answer key the condition reads")
    operator: str = Field(..., description="One of ==, !=, >=, <=, >, <, between")
    value: str = Field(default="", description="Comparison value; 'min,max' for between")

    model_config = ConfigDict(frozen=True)

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, v):
        # Authored JSON sometimes carries bare numbers
        if v is None:
            return ""
        return str(v)


class ConditionalMessage(BaseModel):
    condition: Condition
    messages: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class InputField(BaseModel):
    """One sub-input of a multi-input step."""
    field: str
    label: str
    unit: Optional[str] = Field(default=None, description="Suffix appended in the combined answer, e.g. 'cm'")

    model_config = ConfigDict(frozen=True)


class FlowStep(BaseModel):
    """
    One unit of a check-in script.

    Serialized definitions use camelCase keys (showIf, conditionalMessages,
    imageUrl, imagePosition); both spellings are accepted on load.
    """
    id: str = Field(..., description="Unique, stable identifier within a flow")
    type: StepType = Field(default=StepType.TEXT)
    question: Optional[str] = None
    messages: List[str] = Field(default_factory=list)
    field: Optional[str] = Field(default=None, description="Answer map key for this step's answer")
    options: List[str] = Field(default_factory=list)
    placeholder: Optional[str] = None
    required: bool = False
    show_if: Optional[Condition] = Field(default=None, alias="showIf")
    conditional_messages: List[ConditionalMessage] = Field(default_factory=list, alias="conditionalMessages")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    image_position: ImagePosition = Field(default=ImagePosition.BELOW, alias="imagePosition")
    inputs: List[InputField] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("messages", "options", "conditional_messages", "inputs", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return [] if v is None else v

    @property
    def requires_input(self) -> bool:
        return self.type != StepType.MESSAGE


class FlowTheme(BaseModel):
    """Chat colours. Opaque to the engine, carried for the presentation surface."""
    bg_gradient_from: str = "#020617"
    bg_gradient_via: str = "#172554"
    bg_gradient_to: str = "#020617"
    bot_bubble_bg: str = "rgba(30,41,59,0.8)"
    bot_bubble_text: str = "#e2e8f0"
    user_bubble_bg: str = "#2563eb"
    user_bubble_text: str = "#ffffff"
    button_bg: str = "#2563eb"
    button_hover_bg: str = "#1d4ed8"
    button_text: str = "#ffffff"
    option_bg: str = "rgba(30,41,59,0.5)"
    option_border: str = "rgba(51,65,85,0.5)"
    option_text: str = "#e2e8f0"
    header_bg: str = "transparent"
    header_text: str = "#ffffff"
    input_bg: str = "rgba(30,41,59,0.5)"
    input_border: str = "rgba(51,65,85,0.5)"
    input_text: str = "#ffffff"
    accent_color: str = "#3b82f6"


class FlowDefinition(BaseModel):
    """The full authored script for one check-in conversation."""
    id: Optional[str] = Field(default=None, description="Store identifier")
    owner_id: Optional[str] = Field(default=None, description="Practice that owns the flow")
    name: str = Field(default="", description="Display name")
    description: str = ""
    steps: List[FlowStep] = Field(default_factory=list)
    theme: FlowTheme = Field(default_factory=FlowTheme)
    header_image_url: Optional[str] = None
    is_active: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("steps", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return [] if v is None else v

    @field_validator("theme", mode="before")
    @classmethod
    def merge_theme_defaults(cls, v):
        # Stored themes may predate newer colour keys
        if v is None:
            return FlowTheme()
        if isinstance(v, dict):
            return FlowTheme(**{**FlowTheme().model_dump(), **v})
        return v

    def step_index(self, step_id: str) -> int:
        for index, step in enumerate(self.steps):
            if step.id == step_id:
                return index
        return -1
