from fastapi.testclient import TestClient

from api.dependencies import get_oracle
from config import settings
from main import app
from models.responses import BatchResponse
from stubs import StubOracle, evaluation_json, make_docx

JD = "Looking for a Python developer with React experience and Docker."


def _files(*pairs):
    return [("resumes", (name, content, "application/octet-stream")) for name, content in pairs]


def test_health():
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "gemini_configured" in data


def test_healthz_alias():
    assert TestClient(app).get("/healthz").status_code == 200


def test_evaluate_ranks_candidates(client_with_oracle):
    oracle = StubOracle({"A": evaluation_json(90), "B": evaluation_json(90), "C": evaluation_json(70)})
    client = client_with_oracle(oracle)

    response = client.post(
        "/evaluate",
        data={"job_description": JD},
        files=_files(("A.txt", b"Python"), ("B.docx", make_docx("React")), ("C.txt", b"Docker")),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total_candidates"] == 3
    assert data["job_description_preview"] == JD
    assert [e["candidate_name"] for e in data["evaluations"]] == ["A", "B", "C"]
    assert [e["rank"] for e in data["evaluations"]] == [1, 2, 3]
    assert "error" not in data["evaluations"][0]
    assert data["evaluations"][0]["skills_match"]["matched_skills"] == ["Python"]


def test_evaluate_degraded_records_still_200(client_with_oracle):
    client = client_with_oracle(StubOracle({}, default=evaluation_json(55)))
    response = client.post(
        "/evaluate",
        data={"job_description": JD},
        files=_files(("ok.txt", b"Python"), ("report.csv", b"a,b"), ("empty.txt", b"   ")),
    )
    assert response.status_code == 200
    evaluations = response.json()["evaluations"]
    assert len(evaluations) == 3
    assert evaluations[0]["candidate_name"] == "ok"
    errors = {e["candidate_name"]: e["error"] for e in evaluations[1:]}
    assert errors["empty.txt"] == "Empty resume"
    assert "report.csv" in errors["report.csv"]
    assert all(e["recommendation"] == "NO_MATCH" for e in evaluations[1:])


def test_evaluate_rejects_blank_description(client_with_oracle):
    client = client_with_oracle(StubOracle({}))
    response = client.post("/evaluate", data={"job_description": "   "}, files=_files(("a.txt", b"x")))
    assert response.status_code == 400
    assert response.json()["detail"] == "Job description cannot be empty"


def test_evaluate_rejects_no_files(client_with_oracle):
    client = client_with_oracle(StubOracle({}))
    response = client.post("/evaluate", data={"job_description": JD})
    assert response.status_code == 400
    assert response.json()["detail"] == "At least one resume file is required"


def test_evaluate_rejects_too_many_files(client_with_oracle):
    client = client_with_oracle(StubOracle({}, default=evaluation_json(50)))
    files = _files(*[(f"c{i}.txt", b"text") for i in range(settings.max_resumes + 1)])
    response = client.post("/evaluate", data={"job_description": JD}, files=files)
    assert response.status_code == 400
    assert "Maximum" in response.json()["detail"]


def test_evaluate_rejects_oversized_file(client_with_oracle):
    client = client_with_oracle(StubOracle({}, default=evaluation_json(50)))
    big = b"x" * (settings.max_upload_size_mb * 1024 * 1024 + 1)
    response = client.post("/evaluate", data={"job_description": JD}, files=_files(("big.txt", big)))
    assert response.status_code == 400
    assert "too large" in response.json()["detail"]


def test_evaluate_without_api_key_is_503():
    app.dependency_overrides.clear()
    original = settings.gemini_api_key
    get_oracle.cache_clear()
    try:
        settings.gemini_api_key = ""
        response = TestClient(app).post(
            "/evaluate", data={"job_description": JD}, files=_files(("a.txt", b"x"))
        )
        assert response.status_code == 503
    finally:
        settings.gemini_api_key = original
        get_oracle.cache_clear()


def test_requests_share_one_oracle(monkeypatch):
    from services.evaluator import ResumeEvaluator

    seen = []

    async def record(self, documents, job_description):
        seen.append(self.oracle)
        return BatchResponse(total_candidates=len(documents), job_description_preview=job_description)

    monkeypatch.setattr(ResumeEvaluator, "evaluate_batch", record)
    app.dependency_overrides.clear()
    original = settings.gemini_api_key
    get_oracle.cache_clear()
    try:
        settings.gemini_api_key = "test-key"
        client = TestClient(app)
        for _ in range(2):
            response = client.post(
                "/evaluate", data={"job_description": JD}, files=_files(("a.txt", b"x"))
            )
            assert response.status_code == 200
        assert len(seen) == 2
        assert seen[0] is seen[1]
        assert seen[0] is get_oracle()
    finally:
        settings.gemini_api_key = original
        get_oracle.cache_clear()


def test_evaluate_text(client_with_oracle):
    oracle = StubOracle({"Jane Doe": evaluation_json(81, "STRONG_MATCH"), "Bob": "garbage"})
    client = client_with_oracle(oracle)
    response = client.post(
        "/evaluate/text",
        json={
            "job_description": JD,
            "resumes": [
                {"name": "Bob", "text": "Cook with 10 years experience"},
                {"name": "Jane Doe", "text": "Python, React, Docker"},
            ],
        },
    )
    assert response.status_code == 200
    evaluations = response.json()["evaluations"]
    assert evaluations[0]["candidate_name"] == "Jane Doe"
    assert evaluations[0]["recommendation"] == "STRONG_MATCH"
    assert evaluations[1]["error"] == "Failed to parse AI response"


def test_evaluate_text_rejects_empty_list(client_with_oracle):
    client = client_with_oracle(StubOracle({}))
    response = client.post("/evaluate/text", json={"job_description": JD, "resumes": []})
    assert response.status_code == 400


def test_unexpected_batch_failure_is_500(client_with_oracle, monkeypatch):
    from services.evaluator import ResumeEvaluator

    async def explode(self, documents, job_description):
        raise RuntimeError("misconfigured")

    monkeypatch.setattr(ResumeEvaluator, "evaluate_batch", explode)
    client = client_with_oracle(StubOracle({}))
    response = client.post("/evaluate", data={"job_description": JD}, files=_files(("a.txt", b"x")))
    assert response.status_code == 500
    assert response.json()["detail"] == "misconfigured"


def test_evaluate_text_rejects_long_description_with_400(client_with_oracle):
    client = client_with_oracle(StubOracle({}, default=evaluation_json(50)))
    long_jd = "x" * (settings.max_job_description_chars + 1)
    response = client.post(
        "/evaluate/text",
        json={"job_description": long_jd, "resumes": [{"name": "a", "text": "Python"}]},
    )
    assert response.status_code == 400
    assert "too long" in response.json()["detail"]
