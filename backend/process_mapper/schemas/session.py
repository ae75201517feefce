from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field


class IndustryResolveRequest(BaseModel):
    industry: str = Field(default="", max_length=200)


class GenerateRequest(BaseModel):
    industry: str = Field(default="", max_length=200)
    # Newline-separated process names, as typed into the input form
    processes: str = Field(default="", max_length=10_000)


class ReportRequest(BaseModel):
    email: EmailStr
