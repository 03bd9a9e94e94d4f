# promptmanager/config/schema.py
from pydantic import BaseModel, Field, field_validator
from typing import List

OUTPUT_FORMAT_RULES = (
    "Instructions for the output format:\n"
    "- Output code without descriptions, unless it is important.\n"
    "- Minimize prose, comments and empty lines.\n"
    "- Only show the relevant code that needs to be modified. Use comments to represent the parts that are not modified.\n"
    "- Make it easy to copy and paste.\n"
    "- Consider other possibilities to achieve the result, do not be limited by the prompt."
)

class InstructionDefinition(BaseModel):
    name: str
    content: str

class AppConfig(BaseModel):
    debounce_interval_ms: int = Field(default=300, ge=0) # Quiet period before a recompute
    log_level: str = "INFO"
    task_types: List[str] = Field(default_factory=lambda: [
        "Feature",
        "Bug fix",
        "Code refactoring",
        "Architect",
        "Engineer",
        "Atomic Task List",
    ])
    default_task_type: str = "Feature"
    default_task_instruction: str = "Create a prompt manager app"
    # Custom instruction templates available at startup; the first one is active
    instructions: List[InstructionDefinition] = Field(default_factory=lambda: [
        InstructionDefinition(name="Default", content=OUTPUT_FORMAT_RULES),
        InstructionDefinition(
            name="Python 3.10",
            content="Use Python 3.10 syntax.\n\nPrefer list comprehensions and f-strings.\n\n" + OUTPUT_FORMAT_RULES,
        ),
        InstructionDefinition(
            name="MySQL 8.0",
            content="Use MySQL 8.0 syntax.\n\nPrefer CTEs and window functions.\n\n" + OUTPUT_FORMAT_RULES,
        ),
        InstructionDefinition(
            name="Next.js app router",
            content="Use Next.js app router syntax.\n\nUse tailwindcss and TypeScript. Prefer functional components.\n\n" + OUTPUT_FORMAT_RULES,
        ),
    ])

    @field_validator("task_types")
    @classmethod
    def _dedupe_task_types(cls, value: List[str]) -> List[str]:
        # Keep first occurrence, drop blanks
        seen: List[str] = []
        for name in value:
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen
