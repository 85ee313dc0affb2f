from pydantic import BaseModel, Field


class TransitionIn(BaseModel):
    target_state: str
    expected_version: int = Field(ge=0)


class TransitionOut(BaseModel):
    challenge_id: int
    new_state: str
    version: int
