import base64
import hashlib

from charset_normalizer import from_bytes
from fastapi import FastAPI, UploadFile, File, HTTPException, Query
from pydantic import ValidationError

from . import __version__
from .models import (
    Config,
    HealthResponse,
    LeadingStyle,
    LineEnding,
    SummaryResponse,
    TransformResponse,
)
from .normalize import transform_bytes
from .rules import DEFAULT_TAB_SIZE
from .summary import render_debug, render_summary, summarize_bytes

app = FastAPI(
    title="tfc",
    description="Leading whitespace and line ending checker",
    version=__version__,
)


def _detect_encoding(raw: bytes):
    match = from_bytes(raw).best()
    return match.encoding if match is not None else None


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/transform", response_model=TransformResponse)
async def transform(
    file: UploadFile = File(...),
    leading: LeadingStyle = Query(LeadingStyle.unset),
    trailing: LineEnding = Query(LineEnding.unset),
    tab_size: int = Query(DEFAULT_TAB_SIZE),
):
    try:
        config = Config(leading=leading, trailing=trailing, tab_size=tab_size)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    if config.is_summary:
        raise HTTPException(status_code=422, detail="Nothing to transform; set leading or trailing, or use /summary")

    raw = await file.read()
    out = transform_bytes(raw, config)
    return {
        "transformed": {
            "sha256": hashlib.sha256(out).hexdigest(),
            "content_b64": base64.b64encode(out).decode("ascii"),
            "size": len(out),
        },
        "before": summarize_bytes(raw),
        "after": summarize_bytes(out),
    }


@app.post("/summary", response_model=SummaryResponse)
async def summary(file: UploadFile = File(...), debug: bool = Query(False)):
    raw = await file.read()
    name = file.filename or "<upload>"
    counts = summarize_bytes(raw)
    report = render_debug(name, counts) if debug else render_summary(name, counts)
    return SummaryResponse(
        file=name,
        counts=counts,
        report=report,
        detected_encoding=_detect_encoding(raw),
    )
