import unittest

from blueprint.domain.ai.prompting import FORMAT_RULES, assemble_prompt, build_format_instructions
from blueprint.domain.ai.schema import ArrayField, NumberField, ObjectField, StringField, render_json_schema
from blueprint.services.planning.schemas import FEATURE_TREE


class FormatInstructionTests(unittest.TestCase):
    def _schema(self) -> ObjectField:
        return ObjectField({"a": NumberField(), "items": ArrayField(StringField()), "note": StringField(optional=True)})

    def test_instructions_are_identical_for_identical_schemas(self) -> None:
        self.assertEqual(build_format_instructions(self._schema()), build_format_instructions(self._schema()))
        self.assertEqual(build_format_instructions(FEATURE_TREE), build_format_instructions(FEATURE_TREE))

    def test_instructions_embed_schema_and_rules(self) -> None:
        instructions = build_format_instructions(self._schema())

        self.assertIn(render_json_schema(self._schema()), instructions)
        for index, rule in enumerate(FORMAT_RULES, start=1):
            self.assertIn(f"{index}. {rule}", instructions)

    def test_rules_cover_the_output_contract(self) -> None:
        joined = " ".join(FORMAT_RULES)

        self.assertIn("valid JSON", joined)
        self.assertIn("code blocks", joined)
        self.assertIn("required properties", joined)
        self.assertIn("null for optional", joined)
        self.assertIn("even if empty", joined)

    def test_different_schemas_give_different_instructions(self) -> None:
        other = ObjectField({"b": NumberField()})

        self.assertNotEqual(build_format_instructions(self._schema()), build_format_instructions(other))

    def test_prompt_starts_with_instruction(self) -> None:
        prompt = assemble_prompt("  Describe the project.  ", self._schema())

        self.assertTrue(prompt.startswith("Describe the project.\n\n"))
        self.assertTrue(prompt.endswith(build_format_instructions(self._schema())))


if __name__ == "__main__":
    unittest.main()
