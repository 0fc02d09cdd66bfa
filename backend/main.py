"""
Cube Sketch FastAPI backend

Thin HTTP wrapper around the analysis pipeline for the drawing client.

Endpoints:
    POST /analyze   {strokes, width, height} -> scores + overlay image
    GET  /health    liveness probe
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cubesketch.config import load_config
from cubesketch.errors import EncodingError, ShapeError
from cubesketch.models import AnalysisRequest
from cubesketch.pipeline import analyze_request
from cubesketch.tracer import get_tracer

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(title="Cube Sketch", version="1.0.0")

# CORS for local dev of the drawing client
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

CONFIG = load_config()


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.post("/analyze")
def analyze(request: AnalysisRequest):
    """Score one sketch. Plain def so requests run in the thread pool."""
    tracer = get_tracer()

    try:
        result = analyze_request(request, CONFIG)
    except ShapeError as exc:
        raise HTTPException(status_code=400, detail=exc.problems)
    except EncodingError as exc:
        tracer.event(f"Overlay encoding failed: {exc}", level="ERROR")
        raise HTTPException(status_code=500, detail=str(exc))

    return JSONResponse(result.model_dump(mode="json", by_alias=True))


@app.get("/health")
def health():
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8080)
