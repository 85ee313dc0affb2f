from pydantic import BaseModel


class CategoryOut(BaseModel):
    key: str
    name: str
    description: str
    tier_system: str
    sort_order: int

    class Config:
        from_attributes = True
