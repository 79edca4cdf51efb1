# tests/test_web_app.py

from fastapi.testclient import TestClient

import paper_sections.web.app as web_app_module
from paper_sections.api.models import LlmResponse, ProcessResponse
from paper_sections.llm import LlmClientError
from paper_sections.processing import ProcessingError
from paper_sections.web.app import app


class FakeGrobid:
    def healthcheck(self):
        return True


class FakeService:
    def __init__(self, sections=None, process_error=None, llm_error=None):
        self.grobid_client = FakeGrobid()
        self.sections = sections if sections is not None else {"title": "Mock Title"}
        self.process_error = process_error
        self.llm_error = llm_error
        self.documents = []
        self.llm_requests = []

    def process_document(self, content, filename):
        self.documents.append((content, filename))
        if self.process_error is not None:
            raise self.process_error
        return ProcessResponse(
            message="File processed successfully by GROBID.",
            sections=self.sections,
        )

    def process_with_llm(self, request):
        self.llm_requests.append(request)
        if self.llm_error is not None:
            raise self.llm_error
        return LlmResponse(result="This is the summary.")


def _client(service) -> TestClient:
    app.state.service = service
    return TestClient(app)


def test_health():
    client = _client(FakeService())

    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}

    r = client.get("/health", params={"check_grobid": "true"})
    assert r.json() == {"status": "ok", "grobid": True}


def test_upload_pdf_returns_sections():
    service = FakeService(sections={"title": "Mock Title", "abstract": "Mock Abstract"})
    client = _client(service)

    files = {"file": ("sample.pdf", b"%PDF-1.4 fake content", "application/pdf")}
    r = client.post("/processing", files=files)

    assert r.status_code == 200
    assert r.json() == {
        "message": "File processed successfully by GROBID.",
        "sections": {"title": "Mock Title", "abstract": "Mock Abstract"},
    }
    assert service.documents == [(b"%PDF-1.4 fake content", "sample.pdf")]


def test_upload_rejects_non_pdf():
    service = FakeService()
    client = _client(service)

    files = {"file": ("notes.txt", b"hello", "text/plain")}
    r = client.post("/processing", files=files)

    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid file type. Only PDF is allowed."
    assert service.documents == []


def test_upload_without_file():
    client = _client(FakeService())

    r = client.post("/processing")

    assert r.status_code == 400
    assert r.json()["detail"] == "No file uploaded"


def test_upload_too_large(monkeypatch):
    monkeypatch.setattr(web_app_module.settings, "MAX_UPLOAD_BYTES", 4)
    client = _client(FakeService())

    files = {"file": ("big.pdf", b"%PDF-1.4 too big", "application/pdf")}
    r = client.post("/processing", files=files)

    assert r.status_code == 413


def test_processing_failure_maps_to_502():
    error = ProcessingError("Failed to process document with GROBID: GROBID processing failed with status 500")
    client = _client(FakeService(process_error=error))

    files = {"file": ("sample.pdf", b"%PDF", "application/pdf")}
    r = client.post("/processing", files=files)

    assert r.status_code == 502
    assert "status 500" in r.json()["detail"]


def test_llm_endpoint():
    service = FakeService()
    client = _client(service)

    payload = {"prompt": "Summarize this.", "sections": {"abstract": "This is the abstract."}}
    r = client.post("/processing/llm", json=payload)

    assert r.status_code == 200
    assert r.json() == {"result": "This is the summary."}
    assert service.llm_requests[0].sections == {"abstract": "This is the abstract."}


def test_llm_endpoint_validates_payload():
    client = _client(FakeService())

    assert client.post("/processing/llm", json={"prompt": "", "sections": {"a": "b"}}).status_code == 422
    assert client.post("/processing/llm", json={"prompt": "p", "sections": {}}).status_code == 422
    assert client.post("/processing/llm", json={"prompt": "p"}).status_code == 422


def test_llm_failure_maps_to_502():
    error = LlmClientError("Failed to get response from LLM: Google API Error")
    client = _client(FakeService(llm_error=error))

    r = client.post("/processing/llm", json={"prompt": "p", "sections": {"body": "b"}})

    assert r.status_code == 502
    assert r.json()["detail"] == "Failed to get response from LLM: Google API Error"
