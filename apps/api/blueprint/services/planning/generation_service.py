from functools import lru_cache
import logging
from typing import Any

from fastapi import HTTPException
from pydantic import BaseModel, ConfigDict, Field

from blueprint.core.config import get_settings
from blueprint.domain.ai import StructuredGenerationService, build_generation_service
from blueprint.domain.ai.schema import OutputSchema
from blueprint.services.planning import prompts
from blueprint.services.planning.error_policy import build_structured_error_detail
from blueprint.services.planning.pipeline_runtime import (
    PlanningFailure,
    format_pipeline_error_detail,
    run_generation_with_retry,
)
from blueprint.services.planning.schemas import (
    APP_STRUCTURE,
    DATABASE_SCHEMA,
    FEATURE_TREE,
    TECH_STACK,
)


logger = logging.getLogger(__name__)


class SchemaRequest(BaseModel):
    summary: Any = None


class AppStructureRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: Any = None
    schema_: Any = Field(default=None, alias="schema")


class TechStackRequest(BaseModel):
    summary: Any = None


class FeatureTreeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: Any = None
    schema_: Any = Field(default=None, alias="schema")
    appStructure: Any = None
    techStack: Any = None


class ProjectPlanner:
    """Project-planning use cases built on structured generation."""

    def __init__(self, *, generator: StructuredGenerationService, max_attempts: int = 2) -> None:
        self.generator = generator
        self.max_attempts = max(1, int(max_attempts))

    def _run(self, pipeline: str, instruction: str, schema: OutputSchema) -> dict[str, Any]:
        def attempt(retry_hint: str | None):
            text = instruction if retry_hint is None else instruction + prompts.build_retry_suffix(retry_hint)
            return self.generator.generate_structured(text, schema)

        value, attempt_count = run_generation_with_retry(
            attempt,
            pipeline=pipeline,
            max_attempts=self.max_attempts,
        )
        logger.info("%s succeeded after %d attempt(s)", pipeline, attempt_count)
        return value

    def generate_schema(self, summary: str) -> dict[str, Any]:
        return self._run("schema_generate", prompts.build_schema_prompt(summary), DATABASE_SCHEMA)

    def generate_app_structure(self, summary: str, schema: Any) -> dict[str, Any]:
        return self._run(
            "app_structure_generate",
            prompts.build_app_structure_prompt(summary, schema),
            APP_STRUCTURE,
        )

    def generate_tech_stack(self, summary: str) -> dict[str, Any]:
        return self._run("tech_stack_generate", prompts.build_tech_stack_prompt(summary), TECH_STACK)

    def generate_feature_tree(
        self,
        summary: str,
        schema: Any,
        app_structure: Any,
        tech_stack: Any,
    ) -> dict[str, Any]:
        result = self._run(
            "feature_tree_generate",
            prompts.build_feature_tree_prompt(summary, schema, app_structure, tech_stack),
            FEATURE_TREE,
        )
        return {
            "features": [
                _assign_node_id(feature, "feature", index)
                for index, feature in enumerate(result["features"])
            ]
        }


def _assign_node_id(node: dict[str, Any], prefix: str, index: int) -> dict[str, Any]:
    node_id = f"{prefix}-{index}"
    processed = {
        "id": node_id,
        "title": node["title"],
        "description": node["description"],
        "priority": node["priority"],
        "complexity": node["complexity"],
        "status": "planned",
        "estimatedHours": node["estimatedHours"],
        "category": node["category"],
    }
    children = node.get("children")
    if children is not None:
        processed["children"] = [
            _assign_node_id(child, node_id, child_index) for child_index, child in enumerate(children)
        ]
    return processed


@lru_cache(maxsize=1)
def _get_planner() -> ProjectPlanner:
    settings = get_settings()
    return ProjectPlanner(
        generator=build_generation_service(settings),
        max_attempts=settings.planner_max_attempts,
    )


def _raise_pipeline_http_exception(failure: PlanningFailure) -> None:
    raise HTTPException(
        status_code=failure.status_code,
        detail=build_structured_error_detail(
            error_code=failure.kind,
            message=failure.reason,
            retryable=failure.retryable,
            detail=format_pipeline_error_detail(failure.pipeline, failure.kind, failure.reason),
        ),
    ) from failure


def _require_text(value: Any, message: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise HTTPException(
            status_code=400,
            detail=build_structured_error_detail(
                error_code="invalid_request",
                message=message,
                retryable=False,
            ),
        )
    return text


def _require_document(value: Any, message: str) -> Any:
    if value is None or value == {} or value == []:
        raise HTTPException(
            status_code=400,
            detail=build_structured_error_detail(
                error_code="invalid_request",
                message=message,
                retryable=False,
            ),
        )
    return value


def plan_schema(payload: SchemaRequest) -> dict[str, Any]:
    summary = _require_text(payload.summary, "Project summary is required")
    try:
        return _get_planner().generate_schema(summary)
    except PlanningFailure as failure:
        _raise_pipeline_http_exception(failure)


def plan_app_structure(payload: AppStructureRequest) -> dict[str, Any]:
    summary = _require_text(payload.summary, "Project summary is required")
    schema = _require_document(payload.schema_, "Schema is required")
    try:
        return _get_planner().generate_app_structure(summary, schema)
    except PlanningFailure as failure:
        _raise_pipeline_http_exception(failure)


def plan_tech_stack(payload: TechStackRequest) -> dict[str, Any]:
    summary = _require_text(payload.summary, "Project summary is required")
    try:
        return _get_planner().generate_tech_stack(summary)
    except PlanningFailure as failure:
        _raise_pipeline_http_exception(failure)


def plan_feature_tree(payload: FeatureTreeRequest) -> dict[str, Any]:
    summary = _require_text(payload.summary, "Project summary is required")
    schema = _require_document(payload.schema_, "Schema is required")
    app_structure = _require_document(payload.appStructure, "App structure is required")
    tech_stack = _require_document(payload.techStack, "Tech stack is required")
    try:
        return _get_planner().generate_feature_tree(summary, schema, app_structure, tech_stack)
    except PlanningFailure as failure:
        _raise_pipeline_http_exception(failure)
