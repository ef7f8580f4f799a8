from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from market import compute_market
from market.explain import can_explain, request_explanation
from market.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(title="MarketSolver API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class MarketRequest(BaseModel):
    demand_equation: str
    supply_equation: str
    demand_shift: float = 0.0
    supply_shift: float = 0.0


class ExplainResponse(BaseModel):
    explanation: str


def _compute(req: MarketRequest):
    try:
        return compute_market(req.demand_equation, req.supply_equation,
                              req.demand_shift, req.supply_shift)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Market computation failed")
        raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")


@app.post("/api/equilibrium")
def equilibrium(req: MarketRequest):
    return _compute(req).to_dict()


@app.post("/api/explain", response_model=ExplainResponse)
def explain(req: MarketRequest):
    result = _compute(req)
    if not can_explain(result):
        raise HTTPException(status_code=400,
                            detail="There is no equilibrium to explain.")
    return {"explanation": request_explanation(result)}
