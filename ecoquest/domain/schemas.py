# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------- auth ----------

class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    role: str


# ---------- tasks ----------

class TaskCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=120)
    description: str = ""
    max_points: int = Field(0, ge=0, alias="maxPoints")
    proof_type: Literal["photo", "text"] = Field("photo", alias="proofType")
    group_mode: Literal["solo", "group"] = Field("solo", alias="groupMode")
    max_group_size: Optional[int] = Field(None, ge=2, alias="maxGroupSize")


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    teacher_id: str
    title: str
    description: str
    max_points: int
    proof_type: str
    group_mode: str
    max_group_size: Optional[int] = None
    created_at: int


class TaskListResponse(BaseModel):
    tasks: List[TaskOut]


# ---------- games ----------

class GameOut(BaseModel):
    id: str
    name: str
    category: str
    description: str
    difficulty: str
    points: int
    icon: Optional[str] = None


class GameListResponse(BaseModel):
    games: List[GameOut]
