"""Pydantic models for API request/response schemas."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class DoHQuestion(BaseModel):
    """Question section entry."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: int


class DoHAnswer(BaseModel):
    """Answer section entry."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: int
    ttl: int = Field(alias="TTL")
    data: str


class DoHResponse(BaseModel):
    """Response from the /resolve endpoint, in Google DoH JSON format."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    status: int = Field(alias="Status")
    tc: bool = Field(alias="TC")
    rd: bool = Field(alias="RD")
    ra: bool = Field(alias="RA")
    ad: bool = Field(alias="AD")
    cd: bool = Field(alias="CD")
    question: List[DoHQuestion] = Field(default_factory=list, alias="Question")
    answer: List[DoHAnswer] = Field(default_factory=list, alias="Answer")
