"""Settings schemas"""

from typing import Optional

from pydantic import BaseModel, Field


class SalonConfigResponse(BaseModel):
    cancellationWindowHours: int
    strictResize: bool


class SalonConfigUpdate(BaseModel):
    cancellationWindowHours: Optional[int] = Field(None, ge=0, le=24 * 30)
    strictResize: Optional[bool] = None
