"""HTTP endpoints: customization, PDF generation, URL extraction."""

from __future__ import annotations

import json
from collections.abc import Callable

import pydantic
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from resume_customizer.api.dependencies import get_config, get_customizer_factory
from resume_customizer.config import AppConfig
from resume_customizer.errors import SSRFError, ValidationError
from resume_customizer.export import render_pdf
from resume_customizer.models.customization import CustomizationRequest, DisplayConfig
from resume_customizer.models.resume import ResumeDocument
from resume_customizer.parsers.jd_parser import safe_filename
from resume_customizer.parsers.url_extractor import fetch_job_description
from resume_customizer.pipeline.customizer import ResumeCustomizer

router = APIRouter(prefix="/api")


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except json.JSONDecodeError:
        raise ValidationError("Request body must be valid JSON") from None
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _require(body: dict, field: str) -> object:
    value = body.get(field)
    if value is None or value == "":
        raise ValidationError(f"{field} is required", field=field)
    return value


def _resume_from(body: dict) -> ResumeDocument:
    data = _require(body, "resumeData")
    try:
        return ResumeDocument.from_wire(data)
    except pydantic.ValidationError as exc:
        raise _invalid("resumeData", exc) from None


def _config_from(body: dict) -> DisplayConfig | None:
    data = body.get("config")
    if data is None:
        return None
    try:
        return DisplayConfig.model_validate(data)
    except pydantic.ValidationError as exc:
        raise _invalid("config", exc) from None


def _invalid(field: str, exc: pydantic.ValidationError) -> ValidationError:
    err = ValidationError(f"Invalid {field}", field=field)
    err.details["errors"] = [
        {"loc": ".".join(str(p) for p in e["loc"]), "msg": e["msg"]} for e in exc.errors()
    ]
    return err


@router.post("/optimize-resume")
async def optimize_resume(
    request: Request,
    config: AppConfig = Depends(get_config),
    make_customizer: Callable[[], ResumeCustomizer] = Depends(get_customizer_factory),
):
    """Customize the submitted resume for a job description."""
    body = await _json_body(request)
    job_description = _require(body, "jobDescription")
    base = _resume_from(body)

    customization = CustomizationRequest(
        job_description=str(job_description),
        base=base,
        instructions=body.get("prompt") or None,
        style=body.get("style") or config.pipeline.default_style,
    )
    result = await make_customizer().customize(customization)

    return {
        "success": True,
        "data": result.resume.to_wire(),
        "reasoning": result.reasoning,
        "companyOrRole": result.company_or_role,
        "fallbackUsed": result.fallback_used,
        "errorKind": result.error_kind,
        "provider": result.provider,
        "config": result.config.model_dump(by_alias=True),
    }


@router.post("/generate-pdf")
async def generate_pdf(request: Request, config: AppConfig = Depends(get_config)):
    body = await _json_body(request)
    document = _resume_from(body)
    pdf = await render_pdf(
        document,
        _config_from(body),
        theme=body.get("theme") or config.export.theme,
        strategy=body.get("strategy") or config.export.strategy,
    )
    filename = safe_filename(body.get("filename"))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/extract-url")
async def extract_url(request: Request):
    body = await _json_body(request)
    if not body.get("url"):
        raise ValidationError("URL is required", field="url")
    try:
        posting = await fetch_job_description(str(body["url"]))
    except SSRFError as exc:
        return JSONResponse(status_code=403, content={"success": False, "error": str(exc)})
    except ValueError as exc:
        return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})
    return {"success": True, "content": posting.content, "metadata": posting.metadata}
