"""Query endpoints for the analytics dashboard."""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_engine, get_ws_manager
from api.ws_manager import WebSocketManager
from processor.engine import AnalyticsEngine
from producers.sample_data import SampleDataGenerator

router = APIRouter(prefix="/api")


@router.get("/events")
async def get_events(engine: AnalyticsEngine = Depends(get_engine)):
    """Raw dump of stored events, oldest first."""
    return [e.to_json_dict() for e in engine.get_events()]


@router.delete("/events")
async def clear_events(engine: AnalyticsEngine = Depends(get_engine)):
    engine.clear_events()
    return {"status": "cleared"}


@router.get("/forms")
async def list_forms(engine: AnalyticsEngine = Depends(get_engine)):
    return engine.list_forms()


@router.get("/analytics/{form_id}")
async def get_form_analytics(form_id: str, engine: AnalyticsEngine = Depends(get_engine)):
    """Per-field metrics for one form."""
    metrics = await engine.get_form_analytics(form_id)
    return [m.to_dict() for m in metrics]


@router.get("/analytics/{form_id}/problems")
async def get_problematic_fields(
    form_id: str,
    engine: AnalyticsEngine = Depends(get_engine),
    ws: WebSocketManager = Depends(get_ws_manager),
):
    """Fields with high abandonment or long hesitation."""
    reports = [r.to_dict() for r in await engine.identify_problematic_fields(form_id)]
    if reports:
        await ws.broadcast("problems", {"fields": reports}, form_id=form_id)
    return reports


@router.get("/analytics/{form_id}/heatmap")
async def get_heatmap(
    form_id: str,
    window: str | None = Query(default=None, alias="range", description="24h, 7d or 30d"),
    engine: AnalyticsEngine = Depends(get_engine),
):
    return [p.to_dict() for p in engine.generate_heatmap(form_id, window)]


@router.post("/sample-data/{form_id}")
async def generate_sample_data(
    form_id: str,
    sessions: int | None = Query(default=None, ge=1, le=200),
    seed: int | None = Query(default=None),
    engine: AnalyticsEngine = Depends(get_engine),
):
    """Fill the store with synthetic sessions for ``form_id``."""
    settings = engine.settings
    generator = SampleDataGenerator(form_id, submit_ratio=settings.sample_submit_ratio, seed=seed)
    events = generator.generate(sessions or settings.sample_sessions)
    for event in events:
        engine.ingest(event)
    return {"status": "success", "count": len(events)}
