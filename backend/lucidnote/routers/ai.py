"""AI summary and study-guide routes."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from lucidnote.dependencies import AIServiceDep
from lucidnote.errors import HTTP_STATUS_BY_KIND
from lucidnote.models import ActionError, StudyGuide, StudyGuideRequest, SummarizeRequest

router = APIRouter()


def _error_response(error: ActionError, status_code: int | None) -> JSONResponse:
    status = status_code if status_code and status_code >= 400 else HTTP_STATUS_BY_KIND[error.kind]
    return JSONResponse({"error": error.message, "kind": error.kind.value}, status_code=status)


@router.post("/summarize")
async def summarize(body: SummarizeRequest, service: AIServiceDep):
    result = await service.summarize(body.text, body.max_length)
    if not result.success:
        return _error_response(result.error, result.status_code)
    return {"summary": result.summary}


@router.post("/study-guide", response_model=StudyGuide)
async def generate_study_guide(body: StudyGuideRequest, service: AIServiceDep):
    result = await service.generate_study_guide(body.topic)
    if not result.success:
        return _error_response(result.error, result.status_code)
    return result.study_guide
