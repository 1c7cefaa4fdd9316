from pydantic import BaseModel

"""
Pydantic models for service-level responses
"""


class HealthResponse(BaseModel):
    status: str
    version: str = "0.1.0"
    sandbox: bool = False
