from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import JSONResponse
from loguru import logger

from splitly.deps import get_service
from splitly.exceptions import (
    BatchFailedError,
    DegenerateLedgerError,
    ExtractionError,
    InputValidationError,
    PersistenceError,
)
from splitly.models.schemas import (
    CreateScenariosRequest,
    CreateScenariosResponse,
    DailyTotal,
    ExtractRequest,
    Scenario,
    ScenarioPreview,
)
from splitly.services.scenarios import EXTRACTION_FAILED_REASON, ScenarioService

router = APIRouter()


def current_user(x_user_id: str = Header(...)) -> str:
    return x_user_id


@router.post("/parse", response_model=ScenarioPreview)
async def parse_scenario(
    request: ExtractRequest, service: ScenarioService = Depends(get_service)
):
    logger.info("Previewing scenario: {}", request.input)
    try:
        return await service.preview(request.input, request.currency, request.participants)
    except ExtractionError as e:
        logger.error("Preview extraction failed: {}", e)
        return JSONResponse(status_code=502, content={"error": EXTRACTION_FAILED_REASON})
    except DegenerateLedgerError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/scenarios", response_model=CreateScenariosResponse, status_code=201)
async def create_scenarios(
    request: CreateScenariosRequest,
    user_id: str = Depends(current_user),
    service: ScenarioService = Depends(get_service),
):
    try:
        result = await service.create_scenarios(user_id, request)
    except InputValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except BatchFailedError as e:
        return JSONResponse(
            status_code=400,
            content={
                "error": str(e),
                "failures": [f.model_dump(mode="json") for f in e.failures],
            },
        )
    except PersistenceError as e:
        logger.error("Create scenarios failed: {}", e)
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(
        "Created {} scenario(s), {} failure(s)", len(result.created), len(result.failed)
    )
    return CreateScenariosResponse(scenarios=result.created, failures=result.failed)


@router.get("/scenarios", response_model=list[Scenario])
def list_scenarios(
    category: str | None = None,
    user_id: str = Depends(current_user),
    service: ScenarioService = Depends(get_service),
):
    return service.list_scenarios(user_id, category=category)


@router.get("/scenarios/summary", response_model=list[DailyTotal])
def scenario_summary(
    category: str | None = None,
    user_id: str = Depends(current_user),
    service: ScenarioService = Depends(get_service),
):
    return service.daily_totals(user_id, category=category)


@router.get("/scenarios/{scenario_id}", response_model=Scenario)
def get_scenario(
    scenario_id: int,
    user_id: str = Depends(current_user),
    service: ScenarioService = Depends(get_service),
):
    scenario = service.get_scenario(scenario_id, user_id)
    if scenario is None:
        raise HTTPException(status_code=404, detail="Scenario not found")
    return scenario


@router.delete("/scenarios/{scenario_id}")
def delete_scenario(
    scenario_id: int,
    user_id: str = Depends(current_user),
    service: ScenarioService = Depends(get_service),
):
    try:
        deleted = service.delete_scenario(scenario_id, user_id)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Scenario not found")
    return {"success": True}
