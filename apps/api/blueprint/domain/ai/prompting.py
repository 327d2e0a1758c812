from blueprint.domain.ai.schema import OutputSchema, render_json_schema


FORMAT_RULES = (
    "Your entire response must be valid JSON that matches the schema.",
    "Do NOT include additional text, explanations, or code blocks around the JSON.",
    "Do NOT use escape characters in strings that don't need them.",
    "Ensure all property names match exactly as specified in the schema.",
    "Make sure all required properties are included.",
    "Use null for optional properties you choose not to include.",
    "For array properties, always return an array, even if empty.",
)


def build_format_instructions(schema: OutputSchema) -> str:
    rules = "\n".join(f"{index}. {rule}" for index, rule in enumerate(FORMAT_RULES, start=1))
    return (
        "You must respond with a JSON object that conforms to this schema:\n"
        f"{render_json_schema(schema)}\n"
        "\n"
        "Important guidelines:\n"
        f"{rules}\n"
    )


def assemble_prompt(instruction_text: str, schema: OutputSchema) -> str:
    return f"{instruction_text.strip()}\n\n{build_format_instructions(schema)}"
