import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from rowsolver import settings as settings_store
from rowsolver.engine import solve_system
from rowsolver.parser import DEFAULT_VARIABLES, normalize_variables, parse_equation

logger = logging.getLogger(__name__)

app = FastAPI(title="RowSolver API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ParseRequest(BaseModel):
    equation: str
    variables: str = DEFAULT_VARIABLES
    left_constants: str = "move"


class ParseResponse(BaseModel):
    equation: str
    variables: list[str]
    coefficients: list[float]


class SolveRequest(BaseModel):
    equations: list[str]
    variables: Optional[str] = None
    notation: Optional[str] = None
    decimals: Optional[int] = Field(default=None, ge=0, le=10)
    left_constants: Optional[str] = None


class SettingsRequest(BaseModel):
    variables: Optional[str] = None
    notation: Optional[str] = None
    decimals: Optional[int] = Field(default=None, ge=0, le=10)
    left_constants: Optional[str] = None


class SettingsResponse(BaseModel):
    variables: str
    notation: str
    decimals: int
    left_constants: str


class StepInfo(BaseModel):
    description: str
    expression: str
    explanation: str


class SolveResponse(BaseModel):
    equation: str
    status: str
    solution: Optional[dict[str, float]]
    trace: list[str]
    steps: list[StepInfo]
    final_answer: str
    verification_steps: list[StepInfo]


@app.post("/api/parse", response_model=ParseResponse)
def parse(req: ParseRequest):
    try:
        variables = normalize_variables(req.variables)
        coefficients = parse_equation(req.equation, variables, req.left_constants)
    except ValueError as e:
        logger.warning("Rejected equation %r: %s", req.equation, e)
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "equation": req.equation,
        "variables": list(variables),
        "coefficients": list(coefficients),
    }


@app.post("/api/solve", response_model=SolveResponse)
def solve(req: SolveRequest):
    if not req.equations:
        raise HTTPException(status_code=400, detail="Enter at least one equation.")

    try:
        result = solve_system(
            req.equations,
            variables=req.variables,
            notation=req.notation,
            decimals=req.decimals,
            left_constants=req.left_constants,
        )
    except ValueError as e:
        logger.warning("Rejected system %r: %s", req.equations, e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Solver error")
        raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")

    return result


@app.get("/api/settings", response_model=SettingsResponse)
def read_settings():
    return settings_store.get_settings()


@app.put("/api/settings", response_model=SettingsResponse)
def update_settings(req: SettingsRequest):
    # Unset fields keep their stored value.
    updated = settings_store.get_settings()
    updated.update(req.model_dump(exclude_none=True))
    try:
        return settings_store.save_settings(updated)
    except ValueError as e:
        logger.warning("Rejected settings %r: %s", updated, e)
        raise HTTPException(status_code=400, detail=str(e))


@app.delete("/api/settings", response_model=SettingsResponse)
def delete_settings():
    settings_store.reset_settings()
    return settings_store.get_settings()
