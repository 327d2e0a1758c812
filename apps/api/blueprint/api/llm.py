from typing import Any

from fastapi import APIRouter

from blueprint.services.planning.generation_service import (
    AppStructureRequest,
    FeatureTreeRequest,
    SchemaRequest,
    TechStackRequest,
    plan_app_structure as service_app_structure,
    plan_feature_tree as service_feature_tree,
    plan_schema as service_schema,
    plan_tech_stack as service_tech_stack,
)


router = APIRouter(prefix="/api/llm", tags=["llm"])


@router.post("/schema")
def generate_schema(payload: SchemaRequest) -> dict[str, Any]:
    return service_schema(payload)


@router.post("/app-structure")
def generate_app_structure(payload: AppStructureRequest) -> dict[str, Any]:
    return service_app_structure(payload)


@router.post("/tech-stack")
def generate_tech_stack(payload: TechStackRequest) -> dict[str, Any]:
    return service_tech_stack(payload)


@router.post("/feature-tree")
def generate_feature_tree(payload: FeatureTreeRequest) -> dict[str, Any]:
    return service_feature_tree(payload)
