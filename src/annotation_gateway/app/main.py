import logging
import time
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from src.annotation import (
    AnnotationDataset,
    DisabledRegionStore,
    find_region_containing_point,
    load_annotation_dataset,
    render_overlay_svg,
)
from src.annotation.regions import region_id, region_label
from src.core.config import settings

from .middleware.logging import (
    LoggingMiddleware,
    log_dataset_failure,
    log_hit,
    request_id_of,
)
from .schemas import (
    HitRequest,
    HitResponse,
    InstancesRequest,
    InstancesResponse,
    MetadataResponse,
    OverlayRequest,
    OverlayResponse,
    RegionMetadata,
    RegionSummary,
)

# Set up logger
logger = logging.getLogger(__name__)

DatasetLoader = Callable[[], AnnotationDataset]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    # Startup
    app.state.disabled_regions = DisabledRegionStore()

    if not settings.annotation_encryption_key:
        logger.warning(
            "ANNOTATION_ENCRYPTION_KEY is not set; the insecure development key "
            "will be used to decrypt the dataset"
        )
    if not any(path.is_file() for path in settings.candidate_dataset_paths):
        # Not fatal: the file may be deployed after the process starts.
        logger.warning(
            "No encrypted dataset found yet (searched %s)",
            ", ".join(str(p) for p in settings.candidate_dataset_paths),
        )

    yield

    # Shutdown
    app.state.disabled_regions.clear()


app = FastAPI(
    title="Annotation Review Gateway",
    description="Server-side hit testing and overlay rendering for the annotation canvas",
    version="1.0.0",
    lifespan=lifespan,
)

# Add logging middleware
app.add_middleware(LoggingMiddleware)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_disabled_regions(request: Request) -> DisabledRegionStore:
    store = getattr(request.app.state, "disabled_regions", None)
    if store is None:
        raise RuntimeError("Disabled-region store not initialised (lifespan did not run)")
    return store


def get_dataset_loader() -> DatasetLoader:
    return load_annotation_dataset


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"ok": False, "error": message}, status_code=status_code)


@app.exception_handler(RequestValidationError)
async def invalid_payload(request: Request, exc: RequestValidationError):
    logger.info("[request %s] invalid JSON payload", request_id_of(request))
    return _error(400, "Invalid JSON payload")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
async def health(store: DisabledRegionStore = Depends(get_disabled_regions)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "dataset_configured": any(
            path.is_file() for path in settings.candidate_dataset_paths
        ),
        "disabled_count": len(store),
    }


@app.get("/api/annotation/metadata")
async def metadata(
    request: Request,
    loader: DatasetLoader = Depends(get_dataset_loader),
):
    """Region list without vertex data."""
    try:
        dataset = await run_in_threadpool(loader)
    except Exception as exc:
        log_dataset_failure(request_id_of(request), "metadata", exc)
        return _error(500, "Failed to load metadata")

    regions = [
        RegionMetadata(
            id=region_id(index),
            label=region_label(index),
            bbox=boundary.bbox,
            score=boundary.score,
            iou=boundary.iou,
        )
        for index, boundary in enumerate(dataset.boundaries)
    ]
    return JSONResponse(
        MetadataResponse(regions=regions).model_dump(by_alias=True),
        headers={"Cache-Control": "no-store"},
    )


@app.post("/api/annotation/hit")
async def hit_test(
    request: Request,
    body: dict,
    store: DisabledRegionStore = Depends(get_disabled_regions),
    loader: DatasetLoader = Depends(get_dataset_loader),
):
    """Hit-test a pointer position and return the composed overlay."""
    request_id = request_id_of(request)

    try:
        hit_request = HitRequest.model_validate(body)
    except ValidationError:
        return _error(400, "Invalid request body")
    if hit_request.image_id != settings.annotation_image_id:
        return _error(400, "Invalid request body")

    try:
        dataset = await run_in_threadpool(loader)
    except Exception as exc:
        log_dataset_failure(request_id, "hit-test", exc)
        return _error(500, "Hit-test failed")

    start_time = time.time()
    disabled = set(store.snapshot())
    match = find_region_containing_point(
        dataset.boundaries,
        hit_request.x,
        hit_request.y,
        skip=lambda rid, _boundary: rid in disabled,
    )
    hovered_id = match.id if match else None
    overlay_image = render_overlay_svg(
        dataset,
        highlight_ids=hit_request.queue_ids,
        hovered_id=hovered_id,
        disabled_ids=disabled,
        width=settings.canvas_width,
        height=settings.canvas_height,
    )
    log_hit(request_id, hit_request.x, hit_request.y, hovered_id, time.time() - start_time)

    region = None
    if match:
        region = RegionSummary(
            id=match.id,
            label=match.label,
            score=match.boundary.score,
            iou=match.boundary.iou,
        )
    return HitResponse(
        hover_id=hovered_id, overlay_image=overlay_image, region=region
    ).model_dump(by_alias=True)


@app.post("/api/annotation/overlay")
async def overlay(
    request: Request,
    body: dict,
    store: DisabledRegionStore = Depends(get_disabled_regions),
    loader: DatasetLoader = Depends(get_dataset_loader),
):
    """Render queue / hover / outline layers without a hit test."""
    try:
        overlay_request = OverlayRequest.model_validate(body)
    except ValidationError:
        return _error(400, "Invalid request body")

    try:
        dataset = await run_in_threadpool(loader)
    except Exception as exc:
        log_dataset_failure(request_id_of(request), "overlay", exc)
        return _error(500, "Failed to build overlay")

    image = render_overlay_svg(
        dataset,
        highlight_ids=overlay_request.queue_ids,
        hovered_id=overlay_request.hover_id,
        disabled_ids=store.snapshot(),
        include_outline=overlay_request.include_outline,
        width=settings.canvas_width,
        height=settings.canvas_height,
    )
    return OverlayResponse(overlay_image=image).model_dump(by_alias=True)


@app.get("/api/annotation/instances")
async def list_disabled(store: DisabledRegionStore = Depends(get_disabled_regions)):
    return InstancesResponse(disabled_ids=store.snapshot()).model_dump(by_alias=True)


@app.patch("/api/annotation/instances")
async def update_instances(
    request: Request,
    body: dict,
    store: DisabledRegionStore = Depends(get_disabled_regions),
):
    """Disable or re-enable regions (mock moderation action)."""
    try:
        instances_request = InstancesRequest.model_validate(body)
    except ValidationError:
        return _error(400, "Invalid request body")

    store.set_many_disabled(instances_request.ids, instances_request.disabled)
    logger.info(
        "[request %s] %s %d region(s)",
        request_id_of(request),
        "disabled" if instances_request.disabled else "enabled",
        len(instances_request.ids),
    )
    return InstancesResponse(disabled_ids=store.snapshot()).model_dump(by_alias=True)


@app.delete("/api/annotation/instances")
async def reset_instances(
    request: Request,
    store: DisabledRegionStore = Depends(get_disabled_regions),
):
    """Re-enable every region."""
    store.clear()
    logger.info("[request %s] disabled-region state cleared", request_id_of(request))
    return InstancesResponse(disabled_ids=[]).model_dump(by_alias=True)


if __name__ == "__main__":
    import uvicorn

    host = settings.annotation_gateway_host
    port = settings.annotation_gateway_port
    print(f"Starting Annotation Gateway on {host}:{port}")
    uvicorn.run(app, host=host, port=port)
