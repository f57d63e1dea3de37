from __future__ import annotations
from typing import Dict, Optional
from pydantic import BaseModel, Field

from ..core.cache import Scalar


class ProxyRequest(BaseModel):
    # optional here so a missing endpoint reaches the service and gets its 400 body
    endpoint: Optional[str] = Field(default=None, description="Upstream path, e.g. /soccer/trial/v4/en/competitions.json")
    params: Optional[Dict[str, Scalar]] = Field(default=None, description="Extra query parameters")


class ErrorBody(BaseModel):
    error: str
    message: Optional[str] = None
    endpoint: Optional[str] = None
