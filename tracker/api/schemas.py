"""
tracker/api/schemas.py
Pydantic data shapes shared by the API layer and the client.
No logic here — only data shapes.
"""
from pydantic import BaseModel, ConfigDict, Field


# --- Activity ---

class Activity(BaseModel):
    # Unknown keys ride along untouched; the server stores arrays verbatim
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    date: str = Field(..., description="Calendar date, YYYY-MM-DD")
    name: str
    completed: bool = False
    time: str = ""
    notes: str = ""


# --- Endpoint bodies ---

class SaveResponse(BaseModel):
    success: bool = True
    message: str = "Activities saved successfully"


class ErrorResponse(BaseModel):
    error: str
