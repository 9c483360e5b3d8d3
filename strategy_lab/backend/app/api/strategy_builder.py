"""Strategy Builder endpoints."""

from typing import Any, Dict, List

from fastapi import APIRouter, Body

from strategy_lab.backend.core.base_models import WireModel
from strategy_lab.backend.core.config_loader import LabConfigLoader
from strategy_lab.backend.core.strategy_builder import (
    BlockCatalog,
    BlockTypeDefinition,
    CompiledStrategy,
    Strategy,
    StrategyCompiler,
    StrategyDslSerializer,
    StrategyValidator,
    ValidationConfig,
    ValidationResult,
    get_validation_summary,
)
from strategy_lab.backend.settings import get_settings

router = APIRouter(prefix="/strategy-builder", tags=["strategy-builder"])

settings = get_settings()

catalog = BlockCatalog()
compiler = StrategyCompiler(catalog)
serializer = StrategyDslSerializer(compiler)
validator = StrategyValidator(
    ValidationConfig.from_yaml_config(LabConfigLoader().load_optional(settings.validation_config_name)),
    catalog,
)


class ValidationResponse(WireModel):
    result: ValidationResult
    deployable: bool
    summary: str


@router.get("/blocks", response_model=List[BlockTypeDefinition])
def list_blocks() -> List[BlockTypeDefinition]:
    """Return the available block type definitions."""

    return catalog.get_all()


@router.post("/validate", response_model=ValidationResponse)
def validate_strategy(payload: Strategy) -> ValidationResponse:
    """Validate a strategy graph and report whether it can be deployed."""

    result = validator.validate(payload)
    return ValidationResponse(
        result=result,
        deployable=validator.is_deployable(result),
        summary=get_validation_summary(result),
    )


@router.post("/compile", response_model=CompiledStrategy)
def compile_strategy(payload: Strategy) -> CompiledStrategy:
    """Compile a strategy graph into its executable form."""

    return compiler.compile(payload)


@router.post("/decompile", response_model=Strategy)
def decompile_strategy(payload: Dict[str, Any] = Body(...)) -> Strategy:
    """Rebuild an editable strategy from a compiled document."""

    return serializer.from_json(payload)


__all__ = ["router"]
