import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from signal_advisor.adapters.frames import FrameDecodeError
from signal_advisor.app.bootstrap import build_service, setup_logging
from signal_advisor.app.settings import get_settings
from signal_advisor.core.errors import LaneScoringError
from signal_advisor.core.models import Detection, InputType
from signal_advisor.services.analysis_service import AnalysisService


logger = logging.getLogger(__name__)
settings = get_settings()
setup_logging(settings)

analysis_service = build_service(settings)

app = FastAPI(title="Signal Advisor", version="0.1.0")

# The browser demo calls the API from its own dev server.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_data: Optional[str] = Field(default=None, alias="imageData")
    input_type: InputType = Field(default=InputType.IMAGE, alias="inputType")


class ScoreRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lane_count: int = Field(alias="laneCount")
    detections: List[Detection] = Field(default_factory=list)


def get_service() -> AnalysisService:
    return analysis_service


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/analyze")
def analyze(request: AnalyzeRequest, service: AnalysisService = Depends(get_service)) -> dict:
    if not request.image_data:
        raise HTTPException(status_code=400, detail="No image data provided")
    try:
        record = service.analyze(request.image_data, request.input_type)
    except FrameDecodeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return record.model_dump(mode="json")


@app.post("/score")
def score(request: ScoreRequest, service: AnalysisService = Depends(get_service)) -> dict:
    if request.lane_count > settings.max_score_lanes:
        raise HTTPException(
            status_code=422,
            detail=f"laneCount {request.lane_count} exceeds the limit of {settings.max_score_lanes}",
        )
    try:
        result = service.score(request.detections, request.lane_count)
    except LaneScoringError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return result.model_dump(mode="json")


@app.get("/analyses")
def list_analyses(
    limit: Optional[int] = Query(default=None, ge=1),
    service: AnalysisService = Depends(get_service),
) -> list[dict]:
    records = service.history(limit if limit is not None else settings.history_limit)
    return [record.model_dump(mode="json") for record in records]


@app.get("/analyses/{analysis_id}")
def get_analysis(analysis_id: str, service: AnalysisService = Depends(get_service)) -> dict:
    record = service.get(analysis_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return record.model_dump(mode="json")


@app.delete("/analyses/{analysis_id}", status_code=204)
def delete_analysis(analysis_id: str, service: AnalysisService = Depends(get_service)) -> Response:
    if not service.delete(analysis_id):
        raise HTTPException(status_code=404, detail="Analysis not found")
    return Response(status_code=204)
