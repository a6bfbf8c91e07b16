from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from uuid import UUID

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from PIL import Image, UnidentifiedImageError

from okeycam import okey_scoring
from okeycam.config import settings
from okeycam.feedback_export import FeedbackExporter
from okeycam.hand_supply import MockHandSupplier, extract_hand_from_capture
from okeycam.repository import InMemoryRepository, RecordNotFoundError
from okeycam.schemas import (
    CaptureResponse,
    MockHandResponse,
    ResultGetResponse,
    ScanResponse,
    ScoreFeedbackRequest,
    ScoreRequest,
    ScoreResponse,
)

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="OkeyCam 101 Score API", version="0.1.0")
repo = InMemoryRepository(ttl_hours=settings.image_ttl_hours)
STATIC_DIR = Path(__file__).resolve().parent / "static"
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
hand_supplier = MockHandSupplier()
feedback_exporter = FeedbackExporter()


@app.get("/")
def root() -> dict[str, str]:
    return {
        "message": "OkeyCam 101 Score API",
        "docs": "/docs",
        "health": "/health",
        "scan_ui": "/scan-ui",
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/scan-ui")
def scan_ui() -> FileResponse:
    return FileResponse(STATIC_DIR / "scan_ui.html")


@app.get("/api/v1/hands/mock", response_model=MockHandResponse)
def mock_hand() -> MockHandResponse:
    return MockHandResponse(tiles=hand_supplier.produce_hand())


@app.post("/api/v1/capture", response_model=CaptureResponse)
async def capture(image: UploadFile = File(...), game_id: str | None = Form(None)) -> CaptureResponse:
    image_bytes = await image.read()
    if not image_bytes:
        raise HTTPException(status_code=400, detail="image is required")

    try:
        img = Image.open(BytesIO(image_bytes))
        width, height = img.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise HTTPException(status_code=400, detail="invalid image file") from exc

    payload = extract_hand_from_capture(image_bytes, hand_supplier)
    record = repo.create(
        "capture",
        {
            "game_id": game_id,
            "image": {"width": width, "height": height},
            "hand_estimate": {
                "tiles_count": payload["tiles_count"],
                "tiles": [tile.model_dump(mode="json") for tile in payload["tiles"]],
            },
            "supplier": {"name": hand_supplier.name, "version": hand_supplier.version},
            "warnings": payload["warnings"],
        },
    )
    logger.info("capture %s stored (%dx%d, %d tiles)", record.id, width, height, payload["tiles_count"])
    return CaptureResponse(
        capture_id=record.id,
        status="ok",
        image={
            "width": width,
            "height": height,
            "expires_at": record.expires_at,
        },
        hand_estimate=record.data["hand_estimate"],
        supplier=record.data["supplier"],
        warnings=record.data["warnings"],
    )


@app.post("/api/v1/score", response_model=ScoreResponse)
def score(req: ScoreRequest) -> ScoreResponse:
    result = okey_scoring.score(req.tiles)
    try:
        record = repo.create(
            "score",
            {
                "tiles": [tile.model_dump(mode="json") for tile in req.tiles],
                "result": result.model_dump(),
                "warnings": [],
            },
            parent_id=req.capture_id,
        )
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    logger.info("score %s: %d points from %d tiles", record.id, result.score, result.total_tiles)
    return ScoreResponse(score_id=record.id, status="ok", result=result, warnings=[])


@app.post("/api/v1/scan", response_model=ScanResponse)
async def scan(image: UploadFile = File(...), game_id: str | None = Form(None)) -> ScanResponse:
    captured = await capture(image=image, game_id=game_id)
    score_req = ScoreRequest(capture_id=captured.capture_id, tiles=captured.hand_estimate.tiles)
    scored = score(score_req)
    return ScanResponse(capture=captured, score=scored)


@app.get("/api/v1/results/{item_id}", response_model=ResultGetResponse)
def get_result(item_id: UUID) -> ResultGetResponse:
    chain = repo.lineage(item_id)
    if not chain:
        raise HTTPException(status_code=404, detail="record not found or expired")
    record = chain[0]
    return ResultGetResponse(
        id=record.id,
        type=record.type,
        created_at=record.created_at,
        expires_at=record.expires_at,
        parent_id=record.parent_id,
        lineage=[{"id": item.id, "type": item.type} for item in chain[1:]],
        data=record.data,
    )


@app.post("/api/v1/score/feedback")
def score_feedback(req: ScoreFeedbackRequest) -> JSONResponse:
    score_id = req.score_response.score_id
    try:
        stored_score = repo.require(score_id, "score")
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    payload = req.model_dump(mode="json")
    payload["comment"] = req.comment.strip()
    # the stored result wins over whatever the client echoed back
    payload["score_response"]["result"] = stored_score.data["result"]
    filename, document = feedback_exporter.build(payload)
    try:
        record = repo.create("feedback", {"filename": filename, "document": document}, parent_id=score_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    logger.info("feedback %s exported as %s", record.id, filename)
    return JSONResponse(
        content=jsonable_encoder(document),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
