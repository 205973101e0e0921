from pydantic import BaseModel
from typing import List


class HealthResponse(BaseModel):
    status: str
    version: str
    sandbox_default: bool
    config_issues: List[str]


class ErrorResponse(BaseModel):
    detail: str
