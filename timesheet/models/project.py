"""Project model definitions."""
from typing import Optional

from pydantic import BaseModel, Field


class Project(BaseModel):
    """Project as stored in the projects collection."""

    id: str = Field(alias="_id", serialization_alias="id")
    name: str
    color: Optional[str] = None
    customer: Optional[str] = None
    user_id: str = Field(alias="userId")
    public: bool = False
    team: list[str] = Field(default_factory=list)
    archived: bool = False

    model_config = {"populate_by_name": True}
