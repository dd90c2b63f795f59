"""FastAPI application entrypoint for formulint service mode."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..checker import Checker
from ..errors import DescriptorValidationError, ValidationIssue
from ..serializer import render_descriptor
from ..validators import DescriptorValidator, ValidationResult, load_descriptor


class DescriptorText(BaseModel):
    text: str
    origin: Optional[str] = None


class BatchRequest(BaseModel):
    descriptors: List[DescriptorText] = Field(default_factory=list)


class IssueModel(BaseModel):
    kind: str
    field: str
    detail: str
    origin: Optional[str] = None
    line: Optional[int] = None
    related: List[str] = Field(default_factory=list)


class ValidationResponse(BaseModel):
    origin: Optional[str] = None
    name: Optional[str] = None
    valid: bool
    issues: List[IssueModel] = Field(default_factory=list)


class BatchResponse(BaseModel):
    valid: bool
    results: List[ValidationResponse] = Field(default_factory=list)
    conflicts: List[IssueModel] = Field(default_factory=list)


class RenderResponse(BaseModel):
    name: str
    text: str


class HealthResponse(BaseModel):
    status: str


def _issue_model(issue: ValidationIssue) -> IssueModel:
    return IssueModel(**issue.to_dict())


def _result_model(result: ValidationResult) -> ValidationResponse:
    return ValidationResponse(
        origin=result.origin,
        name=result.name,
        valid=result.ok,
        issues=[_issue_model(issue) for issue in result.issues],
    )


def create_app(
    validator_factory: Callable[[], DescriptorValidator] = DescriptorValidator,
) -> FastAPI:
    """Create the FastAPI application exposing descriptor validation."""

    app = FastAPI(title="formulint", version="0.1.0")

    def get_validator() -> DescriptorValidator:
        return validator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/validate", response_model=ValidationResponse)
    async def validate(
        payload: DescriptorText,
        validator: DescriptorValidator = Depends(get_validator),
    ) -> ValidationResponse:
        return _result_model(validator.validate(payload.text, payload.origin))

    @app.post("/validate/batch", response_model=BatchResponse)
    async def validate_batch(
        payload: BatchRequest,
        validator: DescriptorValidator = Depends(get_validator),
    ) -> BatchResponse:
        report = Checker().check_texts(
            [(item.text, item.origin) for item in payload.descriptors],
            validator=validator,
        )
        return BatchResponse(
            valid=report.ok,
            results=[_result_model(result) for result in report.results],
            conflicts=[_issue_model(issue) for issue in report.conflicts],
        )

    @app.post("/render", response_model=RenderResponse)
    async def render(payload: DescriptorText) -> RenderResponse:
        descriptor = load_descriptor(payload.text, payload.origin)
        return RenderResponse(name=descriptor.name, text=render_descriptor(descriptor))

    @app.exception_handler(DescriptorValidationError)
    async def invalid_descriptor_handler(_: Any, exc: DescriptorValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "issues": [issue.to_dict() for issue in exc.issues]},
        )

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
