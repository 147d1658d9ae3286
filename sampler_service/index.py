from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, conlist

from histogram_sampler.config import SamplerSettings, configure_logging
from histogram_sampler.histogram import rebin
from histogram_sampler.sampler import HistogramSampler, InvalidInput
from histogram_sampler.utils import random_generator, resolve_seed

settings = SamplerSettings.from_env()
configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(title="Histogram sampler", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

startup = datetime.now(timezone.utc)


class SampleRequest(BaseModel):
    bins: list[conlist(int, min_length=2, max_length=2)] = Field(
        ..., min_length=1, description="Histogram as [label, count] pairs"
    )
    bin_width: int = Field(..., ge=1, description="Rounding granularity of the labels")
    size: int = Field(1_000, ge=1, description="Number of samples to draw")
    seed: int | None = Field(
        default=None,
        ge=0,
        description="Optional generator seed; drawn from system entropy when omitted",
    )


class HistogramPayload(BaseModel):
    labels: list[int]
    counts: list[int]


class SampleResponse(BaseModel):
    samples: list[int]
    histogram: HistogramPayload
    value_limit: int
    seed: int


@app.get("/")
@app.get("/api")
@app.get("/api/")
async def health_check() -> dict[str, object]:
    uptime = datetime.now(timezone.utc) - startup
    return {
        "message": "Histogram sampler is running",
        "uptime_seconds": round(uptime.total_seconds(), 2),
    }


@app.post("/sample", response_model=SampleResponse)
@app.post("/api/sample", response_model=SampleResponse)
async def generate_samples(payload: SampleRequest) -> SampleResponse:
    if payload.size > settings.max_samples:
        raise HTTPException(
            status_code=422,
            detail=f"Size must be at most {settings.max_samples}.",
        )
    try:
        sampler = HistogramSampler.from_bins(
            [tuple(pair) for pair in payload.bins], payload.bin_width
        )
    except InvalidInput as error:  # input validation from pure Python layer
        raise HTTPException(status_code=422, detail=str(error)) from error

    seed = resolve_seed(payload.seed)
    samples = sampler.sample_array(random_generator(seed), payload.size).tolist()
    histogram = rebin(samples, sampler.bin_width)
    logger.debug("drew %d samples from %d bins (seed %d)", len(samples), len(sampler.bins), seed)

    return SampleResponse(
        samples=samples,
        histogram=HistogramPayload(labels=list(histogram), counts=list(histogram.values())),
        value_limit=sampler.value_limit,
        seed=seed,
    )


handler = app
