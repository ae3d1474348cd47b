"""Prompt template for the per-candidate Gemini evaluation call."""

from models.responses import Recommendation

_RECOMMENDATIONS = " or ".join(f'"{r.value}"' for r in Recommendation)


def build_evaluation_prompt(resume_text: str, job_description: str, candidate_name: str) -> str:
    """Ask the model to score one resume against the job description.

    The response is expected to be a single JSON object matching
    OracleEvaluation (no rank, no candidate name).
    """
    return f"""You are an expert hiring manager and resume evaluator. Analyze the following resume against the job description provided.

JOB DESCRIPTION:
{job_description}

CANDIDATE RESUME ({candidate_name}):
{resume_text}

Evaluate this candidate and respond with ONLY valid JSON (no markdown, no code fences, no extra text) in EXACTLY this structure:
{{
  "overall_score": <integer 0-100>,
  "skills_match": {{
    "score": <integer 0-100>,
    "matched_skills": [<skills that match the job requirements>],
    "missing_skills": [<required skills not found in the resume>]
  }},
  "experience_match": {{
    "score": <integer 0-100>,
    "summary": "<brief assessment of relevant work experience>"
  }},
  "education_match": {{
    "score": <integer 0-100>,
    "summary": "<brief assessment of educational qualifications>"
  }},
  "certifications": {{
    "score": <integer 0-100>,
    "found": [<relevant certifications found>],
    "recommended": [<missing but recommended certifications>]
  }},
  "strengths": [<3-5 key strengths of this candidate>],
  "weaknesses": [<2-4 areas where the candidate falls short>],
  "overall_assessment": "<2-3 sentence summary of why this candidate is or isn't a good fit>",
  "recommendation": {_RECOMMENDATIONS}
}}

Be thorough, fair, and objective. Consider not just keyword matches but the depth and relevance of experience."""
