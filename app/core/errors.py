from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.schemas.resume import PostingClassification


class ResumePipelineError(RuntimeError):
    status_code = 500

    def __init__(self, message: str, *, code: str = "pipeline_failed"):
        super().__init__(message)
        self.code = code


class ModelTimeoutError(ResumePipelineError):
    def __init__(self, message: str = "OpenAI request timed out"):
        super().__init__(message, code="model_timeout")


class ModelRefusalError(ResumePipelineError):
    def __init__(self, message: str):
        super().__init__(message, code="model_refusal")


class NoJSONFoundError(ResumePipelineError):
    def __init__(self, message: str = "AI did not return valid JSON format. Please try again."):
        super().__init__(message, code="no_json")


class InvalidJSONError(ResumePipelineError):
    def __init__(self, message: str):
        super().__init__(message, code="invalid_json")


class MissingFieldsError(ResumePipelineError):
    def __init__(self, message: str, *, present_keys: list[str] | None = None):
        super().__init__(message, code="missing_fields")
        self.present_keys = list(present_keys or [])


class MalformedContentError(ResumePipelineError):
    def __init__(self, message: str):
        super().__init__(message, code="malformed_content")


class DocumentRenderError(ResumePipelineError):
    def __init__(self, message: str):
        super().__init__(message, code="render_failed")


class ProfileLoadError(ResumePipelineError):
    def __init__(self, message: str):
        super().__init__(message, code="profile_invalid")


class ProfileNotFoundError(ResumePipelineError):
    status_code = 404

    def __init__(self, profile_id: str):
        super().__init__(f'Profile "{profile_id}" not found', code="profile_not_found")
        self.profile_id = profile_id


class PostingRejectedError(ResumePipelineError):
    status_code = 400

    def __init__(self, classification: "PostingClassification"):
        super().__init__(classification.message or "Posting rejected", code="posting_rejected")
        self.classification = classification
