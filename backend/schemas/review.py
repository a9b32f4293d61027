from pydantic import BaseModel, Field, field_validator


# Schema for posting a review; stars are whole numbers from 1 to 5
class ReviewCreate(BaseModel):
    pid: str
    stars: int = Field(..., ge=1, le=5)
    feedback: str = Field(..., min_length=1)

    @field_validator("pid", mode="before")
    @classmethod
    def _pid_as_text(cls, v):
        return str(v) if isinstance(v, int) else v


class ReviewOut(BaseModel):
    id: int
    pid: str
    stars: int
    feedback: str

    class Config:
        from_attributes = True
