import unittest
from unittest.mock import patch

from blueprint.core.config import Settings
from blueprint.domain.ai.errors import ErrorKind
from blueprint.domain.ai.factory import build_generation_service
from blueprint.domain.ai.providers.openai import OpenAICompatibleBackend
from blueprint.domain.ai.schema import NumberField, ObjectField
from blueprint.domain.ai.types import GenerationRequest


_CLEAN_ENV = {"NVIDIA_NIM_API_KEY": "", "LLM_API_KEY": ""}


class SettingsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        with patch.dict("os.environ", _CLEAN_ENV):
            settings = Settings(_env_file=None)

        self.assertEqual(settings.llm_api_key, "")
        self.assertEqual(settings.llm_base_url, "https://integrate.api.nvidia.com/v1")
        self.assertEqual(settings.llm_temperature, 0.2)
        self.assertEqual(settings.llm_max_tokens, 4000)
        self.assertEqual(settings.llm_timeout_ms, 60000)

    def test_api_key_from_nim_variable(self) -> None:
        with patch.dict("os.environ", {"NVIDIA_NIM_API_KEY": "nim-key", "LLM_API_KEY": ""}):
            settings = Settings(_env_file=None)

        self.assertEqual(settings.llm_api_key, "nim-key")


class FactoryTests(unittest.TestCase):
    def test_missing_key_builds_service_that_fails_fast(self) -> None:
        with patch.dict("os.environ", _CLEAN_ENV):
            service = build_generation_service(Settings(_env_file=None))

        result = service.generate(
            GenerationRequest(instruction_text="x", output_schema=ObjectField({"a": NumberField()}))
        )

        self.assertIsNone(service.backend)
        self.assertEqual(result.error_kind, ErrorKind.CONFIG)
        self.assertEqual(result.message, "llm_api_key_missing")

    def test_malformed_base_url_is_config_error(self) -> None:
        with patch.dict("os.environ", {"NVIDIA_NIM_API_KEY": "k", "LLM_BASE_URL": "not a url"}):
            service = build_generation_service(Settings(_env_file=None))

        self.assertTrue(service.config_error.startswith("llm_base_url_invalid"))

    def test_configured_service_uses_settings_defaults(self) -> None:
        with patch.dict(
            "os.environ",
            {"NVIDIA_NIM_API_KEY": "nim-key", "LLM_TIMEOUT_MS": "1500", "LLM_MAX_TOKENS": "800"},
        ):
            service = build_generation_service(Settings(_env_file=None))

        self.assertIsInstance(service.backend, OpenAICompatibleBackend)
        self.assertIsNone(service.config_error)
        self.assertEqual(service.defaults.timeout_ms, 1500)
        self.assertEqual(service.defaults.max_tokens, 800)


if __name__ == "__main__":
    unittest.main()
