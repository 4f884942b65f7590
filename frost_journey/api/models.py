"""Pydantic request bodies for API endpoints."""

from pydantic import BaseModel


class AdvanceBody(BaseModel):
    target: int


class ReplyBody(BaseModel):
    message: str
