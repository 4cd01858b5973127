"""Pydantic response models (DTOs) for FastAPI endpoints."""

from typing import Literal

from pydantic import BaseModel


class ResultMetadataDTO(BaseModel):
    timestamp: str
    source: str


class NormalizedResultDTO(BaseModel):
    content: str
    metadata: ResultMetadataDTO


class QueryResponseDTO(BaseModel):
    status: Literal["success"] = "success"
    data: NormalizedResultDTO


class ErrorResponseDTO(BaseModel):
    status: Literal["error"] = "error"
    message: str


class CacheClearResponseDTO(BaseModel):
    status: Literal["success"] = "success"
    message: str


class HealthResponseDTO(BaseModel):
    status: Literal["success"] = "success"
    message: str
    timestamp: str
