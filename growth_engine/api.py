# growth_engine/api.py
from __future__ import annotations

from dataclasses import asdict
from typing import Annotated, Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .assumptions import (
    ASSUMPTION_META,
    DEFAULT_ASSUMPTIONS,
    AssumptionSet,
    build_assumptions,
    keys_in_group,
)
from .dashboard import CHART_MONTHS, build_dashboard
from .impact import independent_impact
from .levers import DEFAULT_POLICY, LEVERS, LeverOverrides
from .simulator import projection_series

app = FastAPI(title="Growth Engine API", version="1.0")


# -----------------------
# Schemas
# -----------------------
# NaN/inf and out-of-range horizons are rejected with 422
FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]
Month = Annotated[int, Field(ge=0, le=DEFAULT_POLICY.max_horizon)]


class AssumptionsIn(BaseModel):
    customers: Optional[FiniteFloat] = None
    arpu: Optional[FiniteFloat] = None
    churn_rate: Optional[FiniteFloat] = None
    activation_rate: Optional[FiniteFloat] = None
    leads_per_month: Optional[FiniteFloat] = None
    demo_rate: Optional[FiniteFloat] = None
    trial_rate: Optional[FiniteFloat] = None
    paid_rate: Optional[FiniteFloat] = None
    lead_growth_rate: Optional[FiniteFloat] = None


class OverridesIn(BaseModel):
    churn: Optional[FiniteFloat] = None
    arpu: Optional[FiniteFloat] = None
    activation: Optional[FiniteFloat] = None


class ProjectionRequest(BaseModel):
    assumptions: AssumptionsIn = AssumptionsIn()
    overrides: OverridesIn = OverridesIn()
    months: List[Month] = list(CHART_MONTHS)


class ImpactRequest(BaseModel):
    assumptions: AssumptionsIn = AssumptionsIn()
    lever_id: str
    value: FiniteFloat


class ImpactResponse(BaseModel):
    lever_id: str
    value: float
    impact: Optional[int]


class DashboardRequest(BaseModel):
    assumptions: AssumptionsIn = AssumptionsIn()
    overrides: OverridesIn = OverridesIn()


class ProjectionPoint(BaseModel):
    month: int
    customers: float
    mrr: int


class ProjectionResponse(BaseModel):
    baseline: List[ProjectionPoint]
    projected: List[ProjectionPoint]


# -----------------------
# Utilities
# -----------------------
def _to_assumptions(body: AssumptionsIn) -> AssumptionSet:
    """Missing fields take defaults; present ones are clamped to their range."""
    values = {k: v for k, v in body.model_dump().items() if v is not None}
    return build_assumptions(values)


def _to_overrides(body: OverridesIn) -> LeverOverrides:
    values = {}
    for lid, value in body.model_dump().items():
        values[lid] = None if value is None else LEVERS[lid].clamp(value)
    return LeverOverrides(**values)


def _lever_or_404(lever_id: str):
    if lever_id not in LEVERS:
        raise HTTPException(
            status_code=404,
            detail=f"Lever '{lever_id}' not found. Use one of {list(LEVERS)}",
        )
    return LEVERS[lever_id]


# -----------------------
# Error handling
# -----------------------
@app.exception_handler(RequestValidationError)
def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # the echoed input may be NaN/inf, which a JSON response cannot carry
    errors = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


# -----------------------
# Startup checks
# -----------------------
@app.on_event("startup")
def _startup_log() -> None:
    targets = ", ".join(f"{lid}={lever.target:g}" for lid, lever in LEVERS.items())
    print(f"[info] Growth Engine API ready | lever targets: {targets}")


# -----------------------
# Endpoints
# -----------------------
@app.get("/")
def root():
    return {
        "service": "Growth Engine API",
        "version": "1.0",
        "endpoints": {
            "health": "/health",
            "docs": "/docs",
            "openapi": "/openapi.json",
            "defaults": "/defaults",
            "levers": "/levers",
            "projection": "POST /projection",
            "impact": "POST /impact",
            "dashboard": "POST /dashboard",
        },
    }


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/defaults")
def defaults() -> Dict[str, Any]:
    """
    Default assumptions and the input range of every field.
    """
    return {
        "assumptions": DEFAULT_ASSUMPTIONS.to_dict(),
        "fields": {k: asdict(m) for k, m in ASSUMPTION_META.items()},
        "groups": {g: keys_in_group(g) for g in ("business", "funnel")},
    }


@app.get("/levers")
def levers() -> Dict[str, Any]:
    return {
        "levers": [
            {
                "id": lever.id,
                "label": lever.label,
                "subtitle": lever.subtitle,
                "base_key": lever.base_key,
                "target": lever.target,
                "min": lever.min,
                "max": lever.max,
                "step": lever.step,
                "direction": lever.direction,
                "unit": lever.unit,
                "prefix": lever.prefix,
            }
            for lever in LEVERS.values()
        ]
    }


@app.post("/projection", response_model=ProjectionResponse)
def projection(req: ProjectionRequest):
    """
    Baseline and override-scenario series at the requested months.
    """
    assumptions = _to_assumptions(req.assumptions)
    overrides = _to_overrides(req.overrides)
    baseline = projection_series(assumptions, LeverOverrides(), req.months)
    projected = projection_series(assumptions, overrides, req.months)
    return {
        "baseline": baseline.to_dict(orient="records"),
        "projected": projected.to_dict(orient="records"),
    }


@app.post("/impact", response_model=ImpactResponse)
def impact(req: ImpactRequest):
    """
    Independent impact of one lever. `impact` is null when the baseline
    MRR is zero and no percentage is defined.
    """
    lever = _lever_or_404(req.lever_id)
    assumptions = _to_assumptions(req.assumptions)
    value = lever.clamp(req.value)
    return ImpactResponse(
        lever_id=lever.id,
        value=value,
        impact=independent_impact(assumptions, lever.id, value),
    )


@app.post("/dashboard")
def dashboard(req: DashboardRequest):
    assumptions = _to_assumptions(req.assumptions)
    overrides = _to_overrides(req.overrides)
    return build_dashboard(assumptions, overrides)
