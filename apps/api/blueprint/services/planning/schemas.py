from blueprint.domain.ai.schema import (
    ArrayField,
    BoolField,
    EnumField,
    NumberField,
    ObjectField,
    StringField,
)


LEVELS = ("high", "medium", "low")
WORK_CATEGORIES = ("frontend", "backend", "database", "devops", "testing", "documentation", "other")


DATABASE_SCHEMA = ObjectField(
    {
        "tables": ArrayField(
            ObjectField(
                {
                    "name": StringField("The name of the table"),
                    "description": StringField("A description of what this table represents"),
                    "fields": ArrayField(
                        ObjectField(
                            {
                                "name": StringField("The name of the field"),
                                "type": StringField(
                                    "The data type of the field "
                                    "(text, uuid, integer, boolean, timestamp, jsonb, float)"
                                ),
                                "description": StringField("A description of what this field represents"),
                                "required": BoolField("Whether this field is required"),
                                "relations": StringField(
                                    "Relations to other tables in the format tableName.fieldName",
                                    optional=True,
                                ),
                            }
                        )
                    ),
                }
            )
        ),
        "recommendations": ObjectField(
            {
                "additionalTables": ArrayField(
                    StringField(),
                    "Recommendations for additional tables that might be useful",
                ),
                "suggestedIndexes": ArrayField(
                    StringField(),
                    "Suggestions for indexes that might improve performance",
                ),
            }
        ),
    }
)


APP_STRUCTURE = ObjectField(
    {
        "pages": ArrayField(
            ObjectField(
                {
                    "name": StringField("The name of the page"),
                    "route": StringField("The route for this page (e.g., /dashboard)"),
                    "description": StringField("A description of what this page is for"),
                    "components": ArrayField(
                        ObjectField(
                            {
                                "name": StringField("The name of the component"),
                                "description": StringField("What this component does"),
                                "dataRequirements": ArrayField(
                                    StringField(),
                                    "What data this component needs",
                                ),
                            }
                        )
                    ),
                }
            )
        ),
        "recommendations": ObjectField(
            {
                "additionalPages": ArrayField(
                    StringField(),
                    "Recommendations for additional pages that might be useful",
                ),
                "authentication": StringField("Recommendations for authentication requirements"),
            }
        ),
    }
)


TECH_STACK = ObjectField(
    {
        "frontendFramework": StringField("Recommended frontend framework"),
        "backendFramework": StringField("Recommended backend framework"),
        "database": StringField("Recommended database technology"),
        "authenticationService": StringField("Recommended authentication service"),
        "hostingService": StringField("Recommended hosting service"),
        "additionalLibraries": ArrayField(
            ObjectField(
                {
                    "name": StringField("Library name"),
                    "purpose": StringField("What this library is used for"),
                    "recommendation": StringField("Why this library is recommended"),
                }
            )
        ),
        "reasoning": StringField("Reasoning behind these technology recommendations"),
    }
)


def _work_item_fields(noun: str) -> dict:
    return {
        "title": StringField(f"The name of the {noun}"),
        "description": StringField(f"A description of what this {noun} involves"),
        "priority": EnumField(LEVELS, f"The priority level of this {noun}"),
        "complexity": EnumField(LEVELS, f"The complexity level of this {noun}"),
        "estimatedHours": NumberField(f"Estimated hours to complete this {noun}"),
        "category": EnumField(WORK_CATEGORIES, f"The development category this {noun} belongs to"),
    }


_TASK = ObjectField(_work_item_fields("individual task"))

_FEATURE = ObjectField(
    {
        **_work_item_fields("specific feature"),
        "children": ArrayField(_TASK, "Individual tasks within this feature"),
    }
)

FEATURE_TREE = ObjectField(
    {
        "features": ArrayField(
            ObjectField(
                {
                    **_work_item_fields("feature category"),
                    "children": ArrayField(_FEATURE, "Specific features within this category"),
                }
            )
        ),
    }
)
