import json
from typing import Any


def _as_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, indent=2)


def build_schema_prompt(summary: str) -> str:
    return (
        "Based on the following project summary, suggest an appropriate database schema:\n"
        "\n"
        "PROJECT SUMMARY:\n"
        f"{summary.strip()}\n"
        "\n"
        "Generate a comprehensive database schema with appropriate tables and fields.\n"
        "Consider common entities, relationships, and necessary fields for this type of project.\n"
        "Include data types, descriptions, and relationships between tables."
    )


def build_app_structure_prompt(summary: str, schema: Any) -> str:
    return (
        "Based on the following project summary and database schema, "
        "suggest an appropriate application structure:\n"
        "\n"
        "PROJECT SUMMARY:\n"
        f"{summary.strip()}\n"
        "\n"
        "DATABASE SCHEMA:\n"
        f"{_as_json(schema)}\n"
        "\n"
        "Generate a comprehensive application structure with appropriate pages and components.\n"
        "Consider user flows, necessary screens, and components needed to interact with the database.\n"
        "Include routes, descriptions, and data requirements for each component."
    )


def build_tech_stack_prompt(summary: str) -> str:
    return (
        "Based on the following project summary, recommend an appropriate technology stack:\n"
        "\n"
        "PROJECT SUMMARY:\n"
        f"{summary.strip()}\n"
        "\n"
        "Recommend a comprehensive technology stack that would be appropriate for this project.\n"
        "Consider the project requirements, scale, and potential future growth.\n"
        "Include frontend, backend, database, authentication, hosting recommendations, "
        "and any additional libraries.\n"
        "Provide reasoning for each recommendation."
    )


def build_feature_tree_prompt(summary: str, schema: Any, app_structure: Any, tech_stack: Any) -> str:
    return (
        "You are an experienced project manager tasked with creating a detailed project roadmap.\n"
        "\n"
        "PROJECT SUMMARY:\n"
        f"{summary.strip()}\n"
        "\n"
        "DATABASE SCHEMA:\n"
        f"{_as_json(schema)}\n"
        "\n"
        "APPLICATION STRUCTURE:\n"
        f"{_as_json(app_structure)}\n"
        "\n"
        "TECHNOLOGY STACK:\n"
        f"{_as_json(tech_stack)}\n"
        "\n"
        "Create a hierarchical feature tree that covers all aspects of developing this application:\n"
        '1. Level 1: Major feature categories (e.g., "User Authentication", "Data Management")\n'
        '2. Level 2: Specific features within each category (e.g., "Login System", "User Registration")\n'
        "3. Level 3: Individual tasks for implementing each feature "
        '(e.g., "Create login form UI", "Implement password reset")\n'
        "\n"
        "For each node in the tree, include a descriptive title, a detailed description, "
        "priority (high/medium/low), complexity (high/medium/low), estimated hours to complete, "
        "and the development category (frontend, backend, database, devops, testing, documentation, or other).\n"
        "Cover frontend, backend, database, testing, deployment, and documentation work.\n"
        "Be realistic with time estimates and prioritize features appropriately."
    )


def build_retry_suffix(previous_failure: str) -> str:
    return (
        "\n\nYour previous reply could not be used "
        f"({previous_failure}). Reply with exactly one JSON object that satisfies the schema "
        "and nothing else: no prose, no markdown, no code fences."
    )
