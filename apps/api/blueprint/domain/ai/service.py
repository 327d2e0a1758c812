import logging
import time

from blueprint.domain.ai.errors import ErrorKind, GenerationError
from blueprint.domain.ai.extraction import collect_text, extract_json_candidate, parse_json_candidate
from blueprint.domain.ai.prompting import assemble_prompt
from blueprint.domain.ai.providers.base import CompletionBackend
from blueprint.domain.ai.schema import OutputSchema, validate_value
from blueprint.domain.ai.types import GenerationRequest, GenerationResult, ModelParameters


logger = logging.getLogger(__name__)


class StructuredGenerationService:
    """Turn an instruction plus an output schema into a locally validated value.

    The service holds no mutable state; the backend handle is created once at
    process start and shared by concurrent calls. Failures are returned as
    tagged results and never raised.
    """

    def __init__(
        self,
        *,
        backend: CompletionBackend | None,
        defaults: ModelParameters | None = None,
        config_error: str | None = None,
    ) -> None:
        if backend is None and not config_error:
            config_error = "llm_backend_not_configured"
        self.backend = backend
        self.defaults = defaults or ModelParameters()
        self.config_error = config_error

    def generate(self, request: GenerationRequest) -> GenerationResult:
        if self.config_error or self.backend is None:
            logger.warning("structured generation rejected: %s", self.config_error)
            return GenerationResult.failure(ErrorKind.CONFIG, self.config_error or "llm_backend_not_configured")

        parameters = request.model_parameters or self.defaults
        prompt = assemble_prompt(request.instruction_text, request.output_schema)
        started = time.monotonic()

        try:
            reply = self.backend.complete(prompt, parameters=parameters)
        except GenerationError as exc:
            logger.warning("llm backend call failed: %s", exc)
            return GenerationResult.failure(
                exc.kind,
                exc.message,
                timed_out=bool(getattr(exc, "timed_out", False)),
            )
        except Exception as exc:
            logger.exception("llm backend call raised unexpectedly")
            return GenerationResult.failure(ErrorKind.BACKEND, f"llm_backend_failed:{exc}")

        elapsed_ms = int((time.monotonic() - started) * 1000)
        text = collect_text(reply.fragments)

        try:
            candidate = extract_json_candidate(text)
            parsed = parse_json_candidate(candidate, raw_text=text)
            value = validate_value(parsed, request.output_schema)
        except GenerationError as exc:
            logger.warning(
                "structured output rejected kind=%s elapsed_ms=%d: %s",
                exc.kind.value,
                elapsed_ms,
                exc.message,
            )
            logger.debug("raw model output: %s", text)
            return GenerationResult.failure(exc.kind, exc.message, raw_text=text)
        except Exception as exc:
            logger.exception("structured output check raised unexpectedly elapsed_ms=%d", elapsed_ms)
            return GenerationResult.failure(ErrorKind.VALIDATION, f"output_check_failed:{exc}", raw_text=text)

        logger.info("structured output accepted elapsed_ms=%d chars=%d", elapsed_ms, len(text))
        return GenerationResult.success(value)

    def generate_structured(
        self,
        instruction_text: str,
        output_schema: OutputSchema,
        model_parameters: ModelParameters | None = None,
    ) -> GenerationResult:
        return self.generate(
            GenerationRequest(
                instruction_text=instruction_text,
                output_schema=output_schema,
                model_parameters=model_parameters,
            )
        )
