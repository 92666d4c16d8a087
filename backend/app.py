"""
PoseFeedback Backend API
FastAPI server for joint-angle feedback on pose-detection output.
"""

import asyncio
import json
import logging
import os
import tempfile

from typing import List, Optional
from fastapi import FastAPI, File, Form, UploadFile, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import AliasChoices, BaseModel, Field, ValidationError

from analysis import AngleFeedbackEvaluator, default_limbs
from config import load_settings
from pose import PoseResult, keypoint_names

logger = logging.getLogger(__name__)

app = FastAPI(
    title="PoseFeedback API",
    description="Joint-angle feedback for live pose estimation",
    version="1.0.0"
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global instances (built in startup)
settings = None
evaluator = None
renderer = None


class KeypointIn(BaseModel):
    """A keypoint as emitted by the pose model."""
    x: float
    y: float
    z: Optional[float] = None
    score: Optional[float] = None
    name: Optional[str] = None


class PoseIn(BaseModel):
    """One detected person."""
    keypoints: List[KeypointIn]
    keypoints3D: Optional[List[KeypointIn]] = Field(
        default=None, validation_alias=AliasChoices("keypoints3D", "keypoints_3d")
    )
    id: Optional[int] = None


class EvaluateRequest(BaseModel):
    poses: List[PoseIn]
    model: Optional[str] = None


class LimbFeedbackOut(BaseModel):
    """Verdict and style for one limb."""
    limb: str
    angle_degrees: float
    in_range: bool
    color: str
    line_width: float
    text: str


class PoseFeedbackOut(BaseModel):
    id: Optional[int] = None
    limbs: List[LimbFeedbackOut]


class EvaluateResponse(BaseModel):
    model: str
    poses: List[PoseFeedbackOut]


class PointCloudRequest(BaseModel):
    pose: PoseIn
    model: Optional[str] = None


def build_evaluator(cfg) -> AngleFeedbackEvaluator:
    return AngleFeedbackEvaluator(
        limbs=default_limbs(cfg.left_arm_range, cfg.right_arm_range),
        score_threshold=cfg.score_threshold,
        in_range_color=cfg.in_range_color,
        out_of_range_color=cfg.out_of_range_color,
        line_width=cfg.line_width,
    )


@app.on_event("startup")
async def startup():
    """Load settings and build the evaluator and renderer."""
    global settings, evaluator, renderer

    from render import OverlayRenderer

    settings = load_settings()
    keypoint_names(settings.pose_model)  # fail fast on an unknown model
    evaluator = build_evaluator(settings)
    renderer = OverlayRenderer.from_settings(settings)

    print(f"PoseFeedback API ready!")
    print(f"  Pose model:      {settings.pose_model}")
    print(f"  Score threshold: {settings.score_threshold}")
    print(f"  Left arm range:  {settings.left_arm_range.low}-{settings.left_arm_range.high}")
    print(f"  Right arm range: {settings.right_arm_range.low}-{settings.right_arm_range.high}")
    print(f"  Endpoints:")
    print(f"    POST /api/evaluate-pose")
    print(f"    POST /api/annotate-frame")
    print(f"    POST /api/point-cloud")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "model": settings.pose_model,
        "score_threshold": settings.score_threshold,
    }


def _to_pose_results(poses: List[PoseIn], model: str) -> List[PoseResult]:
    try:
        keypoint_names(model)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [PoseResult.from_dict(p.model_dump(), model=model) for p in poses]


def _feedback_out(pose: PoseResult, feedback) -> PoseFeedbackOut:
    return PoseFeedbackOut(
        id=pose.id,
        limbs=[
            LimbFeedbackOut(
                limb=item.limb.name,
                angle_degrees=item.verdict.angle_degrees,
                in_range=item.verdict.in_range,
                color=item.style.color,
                line_width=item.style.line_width,
                text=item.text,
            )
            for item in feedback
        ],
    )


@app.post("/api/evaluate-pose", response_model=EvaluateResponse)
async def evaluate_pose(request: EvaluateRequest):
    """
    Evaluate limb angles for every pose in one frame.

    Limbs whose keypoints are missing or below the score threshold are
    left out of the response for that pose.
    """
    model = request.model or settings.pose_model
    poses = _to_pose_results(request.poses, model)
    return EvaluateResponse(
        model=model,
        poses=[_feedback_out(p, evaluator.evaluate_pose(p)) for p in poses],
    )


def _annotate_sync(content: bytes, poses: List[PoseResult], model: str) -> bytes:
    """Decode, draw and re-encode one frame (CPU-bound, synchronous)."""
    import cv2
    import numpy as np
    from render import OverlayRenderer

    frame = cv2.imdecode(np.frombuffer(content, np.uint8), cv2.IMREAD_COLOR)
    if frame is None:
        raise HTTPException(status_code=400, detail="Could not decode image")

    frame_renderer = renderer
    if model != renderer.model:
        frame_renderer = OverlayRenderer.from_settings(settings, model=model)

    feedback = [evaluator.evaluate_pose(p) for p in poses]
    frame = frame_renderer.draw(frame, poses, feedback)

    ok, encoded = cv2.imencode(".png", frame)
    if not ok:
        raise HTTPException(status_code=500, detail="Could not encode image")
    return encoded.tobytes()


@app.post("/api/annotate-frame")
async def annotate_frame(
    file: UploadFile = File(...),
    poses: str = Form(...),
    model: Optional[str] = Form(None),
):
    """
    Draw keypoints, skeleton and limb feedback onto an uploaded frame.

    Args:
        file: Image file (jpg, png)
        poses: JSON list of poses for this frame
        model: Pose model name (defaults to the configured model)

    Returns:
        Annotated PNG image
    """
    try:
        raw_poses = json.loads(poses)
        pose_models = [PoseIn.model_validate(p) for p in raw_poses]
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        logger.warning("Rejected poses payload: %s", e)
        raise HTTPException(status_code=400, detail=f"Invalid poses payload: {e}")

    model = model or settings.pose_model
    pose_results = _to_pose_results(pose_models, model)
    content = await file.read()

    loop = asyncio.get_event_loop()
    png = await loop.run_in_executor(None, _annotate_sync, content, pose_results, model)
    return Response(content=png, media_type="image/png")


@app.post("/api/point-cloud")
async def point_cloud(request: PointCloudRequest):
    """Render a pose's 3D keypoints as a PNG snapshot."""
    from render import plot_point_cloud

    if not settings.render_3d:
        raise HTTPException(status_code=404, detail="3D rendering is disabled (set RENDER_3D=true)")

    model = request.model or settings.pose_model
    pose = _to_pose_results([request.pose], model)[0]
    if not pose.keypoints_3d:
        raise HTTPException(status_code=400, detail="Pose has no 3D keypoints")

    with tempfile.TemporaryDirectory() as tmp_dir:
        out_path = os.path.join(tmp_dir, "pose3d.png")
        loop = asyncio.get_event_loop()
        await loop.run_in_executor(
            None, plot_point_cloud, pose, out_path, settings.score_threshold
        )
        with open(out_path, "rb") as f:
            png = f.read()

    return Response(content=png, media_type="image/png")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=load_settings().port)
