from pydantic import BaseModel, Field


class ResumeText(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Candidate name or label")
    text: str = Field(..., max_length=50000, description="Plain text resume content")


class TextEvaluateRequest(BaseModel):
    job_description: str = Field(..., description="Job description text")
    resumes: list[ResumeText] = Field(..., description="Already-extracted resume texts")
