import os
import sys
import time
import unittest
import warnings
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep API tests deterministic and offline.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("AI_PROVIDER", "mock")
os.environ.setdefault("RECORD_STORE_BACKEND", "memory")

from fastapi.testclient import TestClient  # noqa: E402

from app.ai.providers.mock_provider import MockCompletionClient  # noqa: E402
from app.ai.types import CompletionError  # noqa: E402
from app.api.deps import get_generation_client, get_pdf_extractor, get_record_store  # noqa: E402
from app.core.record_store import MemoryRecordStore, RecordStoreError  # noqa: E402
from app.main import app  # noqa: E402
from app.parsing.models import ExtractedPdf  # noqa: E402
from app.parsing.pdf_text import PdfExtractionError  # noqa: E402

EN = {"Accept-Language": "en"}

RESUME_PAYLOAD = {
    "name": "سارة أحمد",
    "position": "مهندسة برمجيات",
    "contact": "sara@example.com",
    "experience": "خمس سنوات في تطوير الويب",
    "skills": "Python, FastAPI, SQL",
    "education": "بكالوريوس علوم الحاسب",
}

EMAIL_PAYLOAD = {
    "emailType": "business",
    "subject": "طلب اجتماع",
    "recipientName": "أحمد",
    "keyPoints": "مناقشة خطة المشروع",
    "tone": "formal",
}

CODE_PAYLOAD = {
    "projectTitle": "Todo API",
    "projectDescription": "A small REST API for todo items",
    "language": "Python",
    "features": "CRUD, authentication",
}


class StubExtractor:
    def __init__(self, text="نص المستند", page_count=3, error=None, warnings=(), delay=0.0):
        self.text = text
        self.page_count = page_count
        self.error = error
        self.warnings = list(warnings)
        self.delay = delay
        self.calls = 0

    def extract(self, content, filename):
        self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return ExtractedPdf(text=self.text, page_count=self.page_count, warnings=list(self.warnings))


class FailingClient:
    def __init__(self):
        self.calls = 0

    async def generate(self, messages, *, json_mode=False, max_tokens=2000):
        self.calls += 1
        raise CompletionError("upstream unavailable")


class FailingStore(MemoryRecordStore):
    def create(self, kind, payload):
        raise RecordStoreError("disk full")


class GenerationApiTests(unittest.TestCase):
    def setUp(self):
        self.store = MemoryRecordStore()
        self.llm = MockCompletionClient()
        self.extractor = StubExtractor()
        app.dependency_overrides[get_record_store] = lambda: self.store
        app.dependency_overrides[get_generation_client] = lambda: self.llm
        app.dependency_overrides[get_pdf_extractor] = lambda: self.extractor
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def _use_reply(self, reply):
        self.llm = MockCompletionClient(reply=reply)

    def _post_pdf(self, content=b"%PDF-1.4 test", content_type="application/pdf", data=None, headers=None):
        form = {"summaryType": "general", "summaryLength": "short"} if data is None else data
        return self.client.post(
            "/api/summarize-pdf",
            files={"pdf": ("report.pdf", content, content_type)},
            data=form,
            headers=headers or EN,
        )

    def test_email_end_to_end_envelope(self):
        self._use_reply("<p>ok</p>")
        payload = {"emailType": "thanks", "subject": "s", "recipientName": "r", "keyPoints": "k", "tone": "formal"}
        response = self.client.post("/api/generate-email", json=payload)
        self.assertEqual(response.status_code, 200)
        body = response.json()

        self.assertTrue(body["success"])
        self.assertIsInstance(body["processingTime"], int)
        self.assertGreaterEqual(body["processingTime"], 0)
        email = body["email"]
        self.assertEqual(email["id"], 1)
        self.assertEqual(email["generatedContent"], "<p>ok</p>")
        self.assertEqual(email["recipientName"], "r")
        self.assertIn("createdAt", email)
        self.assertEqual(self.llm.calls[0].max_tokens, 1500)

    def test_missing_field_is_rejected_without_model_call(self):
        cases = [
            ("/api/generate-resume", RESUME_PAYLOAD, "skills"),
            ("/api/generate-email", EMAIL_PAYLOAD, "tone"),
            ("/api/correct-arabic", {"originalText": "نص"}, "originalText"),
            ("/api/generate-code", CODE_PAYLOAD, "language"),
        ]
        for path, payload, field in cases:
            with self.subTest(path=path):
                incomplete = {key: value for key, value in payload.items() if key != field}
                response = self.client.post(path, json=incomplete, headers=EN)
                self.assertEqual(response.status_code, 400)
                body = response.json()
                self.assertFalse(body["success"])
                self.assertIn(field, body["error"])

        self.assertEqual(self.llm.calls, [])
        self.assertEqual(self.client.get("/api/records/email").json()["records"], [])

    def test_blank_and_non_string_fields_are_rejected(self):
        blank = {**RESUME_PAYLOAD, "name": "   "}
        response = self.client.post("/api/generate-resume", json=blank, headers=EN)
        self.assertEqual(response.status_code, 400)

        numeric = {**EMAIL_PAYLOAD, "subject": 42}
        response = self.client.post("/api/generate-email", json=numeric, headers=EN)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.llm.calls, [])

    def test_validation_message_defaults_to_arabic(self):
        response = self.client.post("/api/correct-arabic", json={})
        self.assertEqual(response.status_code, 400)
        self.assertIn("الحقل", response.json()["error"])

    def test_malformed_json_body_is_rejected(self):
        response = self.client.post(
            "/api/correct-arabic",
            content=b'{"originalText": ',
            headers={**EN, "Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["error"],
            "The request could not be read. Please check your input and try again.",
        )

    def test_rejected_request_consumes_no_identifier(self):
        self.client.post("/api/generate-email", json={"subject": "x"})
        response = self.client.post("/api/generate-email", json=EMAIL_PAYLOAD)
        self.assertEqual(response.json()["email"]["id"], 1)

    def test_identifiers_are_shared_across_kinds(self):
        email = self.client.post("/api/generate-email", json=EMAIL_PAYLOAD).json()
        resume = self.client.post("/api/generate-resume", json=RESUME_PAYLOAD).json()
        correction = self.client.post("/api/correct-arabic", json={"originalText": "هذا نص"}).json()
        code = self.client.post("/api/generate-code", json=CODE_PAYLOAD).json()

        ids = [
            email["email"]["id"],
            resume["resume"]["id"],
            correction["correction"]["id"],
            code["codeGeneration"]["id"],
        ]
        self.assertEqual(ids, [1, 2, 3, 4])

    def test_identical_requests_create_distinct_records(self):
        first = self.client.post("/api/generate-resume", json=RESUME_PAYLOAD).json()
        second = self.client.post("/api/generate-resume", json=RESUME_PAYLOAD).json()
        self.assertNotEqual(first["resume"]["id"], second["resume"]["id"])
        self.assertEqual(len(self.llm.calls), 2)

    def test_resume_uses_raw_model_html(self):
        self._use_reply("<h1>سارة</h1>")
        body = self.client.post("/api/generate-resume", json=RESUME_PAYLOAD).json()
        self.assertEqual(body["resume"]["generatedContent"], "<h1>سارة</h1>")
        self.assertEqual(body["resume"]["education"], RESUME_PAYLOAD["education"])
        self.assertEqual(self.llm.calls[0].max_tokens, 2000)

    def test_correction_missing_score_defaults_to_zero(self):
        self._use_reply('{"correctedText": "هذا نص صحيح", "errorsFound": 2, "wordsImproved": "3"}')
        body = self.client.post("/api/correct-arabic", json={"originalText": "هذا نص صحيخ"}).json()
        correction = body["correction"]
        self.assertEqual(correction["correctedText"], "هذا نص صحيح")
        self.assertEqual(correction["errorsFound"], 2)
        self.assertEqual(correction["wordsImproved"], 3)
        self.assertEqual(correction["readabilityScore"], 0)
        self.assertTrue(self.llm.calls[0].json_mode)

    def test_correction_non_json_reply_keeps_original_text(self):
        self._use_reply("not json at all")
        body = self.client.post("/api/correct-arabic", json={"originalText": "نص أصلي"}).json()
        self.assertTrue(body["success"])
        self.assertEqual(body["correction"]["correctedText"], "نص أصلي")
        self.assertEqual(body["correction"]["errorsFound"], 0)

    def test_code_generation_defaults(self):
        self._use_reply('{"code": "print(1)", "linesOfCode": 12.4}')
        body = self.client.post("/api/generate-code", json=CODE_PAYLOAD).json()
        code = body["codeGeneration"]
        self.assertEqual(code["generatedCode"], "print(1)")
        self.assertEqual(code["linesOfCode"], 12)
        self.assertEqual(code["estimatedTime"], 0)
        self.assertEqual(code["codeStyle"], "clean")
        self.assertIsNone(code["framework"])
        self.assertIsNone(code["fileStructure"])
        self.assertIn("None specified", self.llm.calls[0].user_prompt)
        self.assertEqual(self.llm.calls[0].max_tokens, 4000)

    def test_generation_failure_returns_localized_error(self):
        self.llm = FailingClient()
        response = self.client.post("/api/generate-email", json=EMAIL_PAYLOAD, headers=EN)
        self.assertEqual(response.status_code, 500)
        body = response.json()
        self.assertEqual(body, {"success": False, "error": "Failed to generate email. Please check your input and try again."})
        self.assertEqual(self.client.get("/api/records/email").json()["records"], [])

        response = self.client.post("/api/generate-email", json=EMAIL_PAYLOAD)
        self.assertIn("تعذر", response.json()["error"])

    def test_storage_failure_returns_storage_error(self):
        self.store = FailingStore()
        response = self.client.post("/api/generate-resume", json=RESUME_PAYLOAD, headers=EN)
        self.assertEqual(response.status_code, 500)
        self.assertFalse(response.json()["success"])
        self.assertIn("could not be saved", response.json()["error"])

    def test_summarize_pdf_uses_extracted_text(self):
        self._use_reply('{"summary": "ملخص", "summaryWords": 120, "compressionRatio": "80%"}')
        response = self._post_pdf(data={"summaryType": "general", "summaryLength": "medium", "focusAreas": "الأرقام"})
        self.assertEqual(response.status_code, 200)
        summary = response.json()["summary"]

        self.assertEqual(summary["fileName"], "report.pdf")
        self.assertEqual(summary["fileSize"], len(b"%PDF-1.4 test"))
        self.assertEqual(summary["summaryContent"], "ملخص")
        self.assertEqual(summary["originalContent"], "نص المستند")
        self.assertEqual(summary["originalPages"], 3)
        self.assertEqual(summary["summaryWords"], 120)
        self.assertEqual(summary["compressionRatio"], 80)
        self.assertEqual(summary["focusAreas"], "الأرقام")
        self.assertEqual(summary["processingTime"], response.json()["processingTime"])

        prompt = self.llm.calls[0].user_prompt
        self.assertIn("نص المستند", prompt)
        self.assertIn("500-700 words", prompt)
        self.assertIn("Focus areas: الأرقام", prompt)

    def test_summarize_pdf_falls_back_to_placeholder(self):
        self.extractor = StubExtractor(error=PdfExtractionError("broken"))
        response = self._post_pdf(data={"summaryType": "general", "summaryLength": "short", "focusAreas": ""})
        self.assertEqual(response.status_code, 200)
        summary = response.json()["summary"]
        self.assertEqual(summary["originalContent"], "PDF content from report.pdf")
        self.assertIsNone(summary["focusAreas"])
        self.assertEqual(summary["summaryContent"], "")
        self.assertIn("PDF content from report.pdf", self.llm.calls[0].user_prompt)

    def test_summarize_pdf_rejects_oversized_file(self):
        oversized = b"0" * (10 * 1024 * 1024 + 1)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            response = self._post_pdf(content=oversized)
        self.assertEqual(response.status_code, 413)
        self.assertFalse(response.json()["success"])
        self.assertIn("10 MB", response.json()["error"])
        self.assertEqual(self.llm.calls, [])
        self.assertEqual(self.extractor.calls, 0)
        self.assertEqual([str(w.message) for w in caught if "HTTP_413" in str(w.message)], [])

    def test_summarize_pdf_processing_time_covers_model_call_only(self):
        self.extractor = StubExtractor(delay=0.3)
        response = self._post_pdf()
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(self.extractor.calls, 1)
        self.assertLess(body["processingTime"], 300)
        self.assertEqual(body["summary"]["processingTime"], body["processingTime"])

    def test_summarize_pdf_logs_extraction_warnings(self):
        self.extractor = StubExtractor(warnings=["page 2 has no text layer"])
        with self.assertLogs("app.api.v1.generation", level="INFO") as logs:
            response = self._post_pdf()
        self.assertEqual(response.status_code, 200)
        self.assertTrue(any("pdf_text_warnings" in line and "page 2 has no text layer" in line for line in logs.output))

    def test_unexpected_error_returns_localized_envelope(self):
        self.extractor = StubExtractor(error=RuntimeError("extractor crashed"))
        client = TestClient(app, raise_server_exceptions=False)

        response = client.post(
            "/api/summarize-pdf",
            files={"pdf": ("report.pdf", b"%PDF-1.4 test", "application/pdf")},
            data={"summaryType": "general", "summaryLength": "short"},
            headers=EN,
        )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "error": "Something went wrong. Please try again."})
        self.assertEqual(self.llm.calls, [])

        response = client.post(
            "/api/summarize-pdf",
            files={"pdf": ("report.pdf", b"%PDF-1.4 test", "application/pdf")},
            data={"summaryType": "general", "summaryLength": "short"},
        )
        self.assertEqual(response.status_code, 500)
        self.assertIn("حدث خطأ", response.json()["error"])
        self.assertEqual(self.llm.calls, [])

    def test_openapi_documents_error_envelope(self):
        spec = self.client.get("/openapi.json").json()
        error_ref = "#/components/schemas/ErrorResponse"
        self.assertIn("ErrorResponse", spec["components"]["schemas"])

        email = spec["paths"]["/api/generate-email"]["post"]["responses"]
        for code in ("400", "429", "500"):
            self.assertEqual(email[code]["content"]["application/json"]["schema"]["$ref"], error_ref)

        pdf = spec["paths"]["/api/summarize-pdf"]["post"]["responses"]
        self.assertEqual(pdf["413"]["content"]["application/json"]["schema"]["$ref"], error_ref)

        lookup = spec["paths"]["/api/records/{kind}/{record_id}"]["get"]["responses"]
        self.assertEqual(lookup["404"]["content"]["application/json"]["schema"]["$ref"], error_ref)

    def test_summarize_pdf_rejects_non_pdf(self):
        response = self._post_pdf(content=b"hello", content_type="text/plain")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Only PDF files are supported.")
        self.assertEqual(self.llm.calls, [])

    def test_summarize_pdf_requires_file_and_options(self):
        response = self.client.post(
            "/api/summarize-pdf",
            data={"summaryType": "general", "summaryLength": "short"},
            headers=EN,
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Please upload a PDF file.")

        response = self._post_pdf(data={"summaryType": "general"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Please specify summary type and length.")
        self.assertEqual(self.llm.calls, [])

    def test_record_lookup(self):
        created = self.client.post("/api/generate-email", json=EMAIL_PAYLOAD).json()["email"]

        response = self.client.get(f"/api/records/email/{created['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["record"], created)

        missing = self.client.get(f"/api/records/resume/{created['id']}", headers=EN)
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json(), {"success": False, "error": "Record not found."})

    def test_record_listing_is_newest_first(self):
        for _ in range(3):
            self.client.post("/api/generate-email", json=EMAIL_PAYLOAD)
        body = self.client.get("/api/records/email", params={"limit": 2}).json()
        self.assertTrue(body["success"])
        self.assertEqual([item["id"] for item in body["records"]], [3, 2])

    def test_unknown_record_kind_is_rejected(self):
        response = self.client.get("/api/records/user/1", headers=EN)
        self.assertEqual(response.status_code, 400)
        self.assertIn("kind", response.json()["error"])

    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "healthy")
        self.assertEqual(body["recordStore"], "memory")


if __name__ == "__main__":
    unittest.main()
