import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models.fake import FakeListLLM

import app as app_module
from conftest import FailingLLM, FakeResumeExtractor, FakeTranscriber
from verq.api import InterviewService, build_session
from verq.storage import JSONFileStore
from verq.utils.config import Settings

USER = {"x-user-id": "u1"}
RESUME = {"resume": ("resume.pdf", b"%PDF-1.4 resume", "application/pdf")}


def audio_file(content=b"fake-webm-audio"):
    return {"audio": ("answer.webm", content, "audio/webm")}


@pytest.fixture
def service(tmp_path, monkeypatch):
    service = InterviewService(settings=Settings(storage_dir=tmp_path, max_upload_bytes=1024))
    monkeypatch.setattr(app_module, "get_service", lambda: service)
    return service


@pytest.fixture
def client(service, make_session):
    service.llm = object()
    service.session = make_session()
    return TestClient(app_module.app)


def start_interview(client):
    response = client.post(
        "/interviews/start", data={"job_role": "Backend Engineer"}, files=RESUME, headers=USER
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_health(client, tmp_path):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "llm_ready": True, "storage_dir": str(tmp_path)}


def test_service_not_ready(service):
    response = TestClient(app_module.app).get("/interviews", headers=USER)

    assert response.status_code == 503
    assert response.json()["status"] == "error"


def test_register_user(client):
    response = client.post("/users", json={"user_id": "u2", "email": "sam@example.com"})

    assert response.status_code == 201
    assert response.json()["data"]["id"] == "u2"


def test_start_interview(client):
    data = start_interview(client)

    assert data["question"] == "Question 1?"
    assert data["status"] == "in_progress"


def test_start_rejects_non_pdf(client):
    response = client.post(
        "/interviews/start",
        data={"job_role": "Backend Engineer"},
        files={"resume": ("resume.txt", b"plain text", "text/plain")},
        headers=USER
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid file type for resume")


def test_start_with_unreadable_resume(client):
    response = client.post(
        "/interviews/start",
        data={"job_role": "Backend Engineer"},
        files={"resume": ("resume.pdf", b"", "application/pdf")},
        headers=USER
    )

    assert response.status_code == 422
    assert response.json() == {"status": "error", "message": "The uploaded resume is empty."}


def test_start_with_unknown_user(client):
    response = client.post(
        "/interviews/start",
        data={"job_role": "Backend Engineer"},
        files=RESUME,
        headers={"x-user-id": "nobody"}
    )

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_upstream_failure_is_bad_gateway(service, make_session):
    service.session = make_session(question_llm=FailingLLM(error=RuntimeError("boom")))
    client = TestClient(app_module.app)

    response = client.post(
        "/interviews/start", data={"job_role": "Backend Engineer"}, files=RESUME, headers=USER
    )

    assert response.status_code == 502
    assert response.json()["message"] == "Failed to generate interview question. Please try again."


def test_submit_answer(client):
    started = start_interview(client)

    response = client.post(
        f"/interviews/{started['interview_id']}/answer",
        data={"current_question": started["question"], "expected_rounds": "0"},
        files=audio_file(),
        headers=USER
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["is_complete"] is False
    assert data["next_question"] == "Question 2?"
    assert data["evaluation"]["technical_accuracy"]["score"] == 8


def test_stale_submission_conflicts(client):
    started = start_interview(client)
    url = f"/interviews/{started['interview_id']}/answer"
    payload = {"current_question": started["question"], "expected_rounds": "0"}

    assert client.post(url, data=payload, files=audio_file(), headers=USER).status_code == 200
    response = client.post(url, data=payload, files=audio_file(), headers=USER)

    assert response.status_code == 409


def test_audio_too_large(client):
    started = start_interview(client)

    response = client.post(
        f"/interviews/{started['interview_id']}/answer",
        data={"current_question": started["question"]},
        files=audio_file(b"x" * 2048),
        headers=USER
    )

    assert response.status_code == 400


def test_other_users_interview_is_forbidden(client):
    started = start_interview(client)

    response = client.get(f"/interviews/{started['interview_id']}", headers={"x-user-id": "u2"})

    assert response.status_code == 403
    assert response.json() == {"status": "error", "message": "Unauthorized access"}


def test_missing_interview(client):
    response = client.get("/interviews/missing", headers=USER)

    assert response.status_code == 404
    assert response.json() == {"status": "error", "message": "Interview not found"}


def test_cancelled_interview_conflicts(client):
    started = start_interview(client)
    interview_id = started["interview_id"]

    cancelled = client.post(f"/interviews/{interview_id}/cancel", headers=USER)
    response = client.post(
        f"/interviews/{interview_id}/answer",
        data={"current_question": started["question"]},
        files=audio_file(),
        headers=USER
    )

    assert cancelled.json()["data"]["status"] == "cancelled"
    assert response.status_code == 409


def test_follow_up_and_details(client):
    started = start_interview(client)
    interview_id = started["interview_id"]

    follow_up = client.post(f"/interviews/{interview_id}/follow-up", headers=USER)
    detail = client.get(f"/interviews/{interview_id}", headers=USER)
    listing = client.get("/interviews", headers=USER)

    assert follow_up.json()["data"]["next_question"] == "Question 2?"
    assert detail.json()["data"]["questions"] == []
    assert [item["id"] for item in listing.json()["data"]] == [interview_id]


def test_interview_runs_to_completion(service, make_session):
    service.session = make_session(total_rounds=1)
    client = TestClient(app_module.app)
    started = start_interview(client)
    interview_id = started["interview_id"]

    response = client.post(
        f"/interviews/{interview_id}/answer",
        data={"current_question": started["question"]},
        files=audio_file(),
        headers=USER
    )
    finalized = client.post(f"/interviews/{interview_id}/finalize", headers=USER)
    summary = client.get("/interviews", headers=USER).json()["data"][0]

    data = response.json()["data"]
    assert data["is_complete"] is True
    assert data["next_question"] is None
    assert data["overall_evaluation"]["hiring_recommendation"]["decision"] == "HIRE"
    assert finalized.json()["data"] == data["overall_evaluation"]
    assert summary["status"] == "completed"
    assert summary["overall_score"] == 8


def test_user_id_is_not_a_path(service, tmp_path):
    storage = tmp_path / "data"
    service.session = build_session(
        service.settings,
        FakeListLLM(responses=["Question?"]),
        store=JSONFileStore(storage),
        transcriber=FakeTranscriber(),
        resume_extractor=FakeResumeExtractor()
    )
    client = TestClient(app_module.app)

    created = client.post("/users", json={"user_id": "../../escaped"})
    listing = client.get("/interviews", headers={"x-user-id": "../../escaped"})

    assert created.status_code == 201
    assert listing.json()["data"] == []
    assert not (tmp_path / "escaped.json").exists()
    assert all(path.is_relative_to(storage) for path in tmp_path.rglob("*.json"))
