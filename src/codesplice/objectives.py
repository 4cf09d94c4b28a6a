"""Refactoring objectives per analyzer rule.

Loads the table from the YAML file named by ``settings.objectives_path`` with
fallback to built-in defaults if:
- File doesn't exist
- File is malformed
- The ``objectives`` section is missing
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

import yaml

from .config import settings

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTION = (
    "Refactor the provided Java code blocks to resolve the listed issues. "
    "Return each rewritten method in full, keeping its name and signature. "
    "New helper methods may be added; do not return unchanged code."
)

DEFAULT_OBJECTIVE_KEY = "default"

DEFAULT_OBJECTIVES: Dict[str, str] = {
    DEFAULT_OBJECTIVE_KEY: "Refactor this code to improve maintainability and reduce complexity while ensuring correctness.",
    "CyclomaticComplexity": "Reduce branching and split complex logic into smaller, reusable methods while preserving functionality.",
    "CognitiveComplexity": "Refactor deeply nested structures, simplify conditions, and improve readability while maintaining correctness.",
    "NPathComplexity": "Reduce execution paths by simplifying conditionals and avoiding redundant logic without altering behavior.",
    "ExcessivePublicCount": "Consider reducing the number of public methods by encapsulating logic within private methods where possible.",
}


@dataclass
class ObjectiveTable:
    """Instruction text plus rule id -> objective mapping.

    Attributes:
        instruction: Collaborator-facing instruction sent with every request
        objectives: Objective text keyed by rule id, with a ``default`` entry
    """

    instruction: str = DEFAULT_INSTRUCTION
    objectives: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_OBJECTIVES))

    def objective_for(self, rule_id: str) -> str:
        if rule_id in self.objectives:
            return self.objectives[rule_id]
        return self.objectives.get(DEFAULT_OBJECTIVE_KEY, DEFAULT_OBJECTIVES[DEFAULT_OBJECTIVE_KEY])


def load_objective_table(config_path: Optional[Path] = None) -> ObjectiveTable:
    """Load the objective table from YAML.

    Args:
        config_path: YAML file to read (defaults to settings.objectives_path)

    Returns:
        ObjectiveTable with loaded values merged over the defaults
    """
    config_path = Path(config_path or settings.objectives_path)

    if not config_path.exists():
        logger.debug(f"[Objectives] {config_path} not found, using default objectives")
        return ObjectiveTable()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"[Objectives] Error loading {config_path}: {e}, using defaults")
        return ObjectiveTable()

    if not isinstance(data, dict) or not isinstance(data.get("objectives"), dict):
        logger.warning(f"[Objectives] No 'objectives' section in {config_path}, using defaults")
        return ObjectiveTable()

    objectives = dict(DEFAULT_OBJECTIVES)
    objectives.update({str(rule): str(text).strip() for rule, text in data["objectives"].items()})
    instruction = data.get("instruction")
    return ObjectiveTable(
        instruction=str(instruction).strip() if instruction else DEFAULT_INSTRUCTION,
        objectives=objectives,
    )


@lru_cache(maxsize=1)
def get_objective_table() -> ObjectiveTable:
    return load_objective_table()


def get_instruction(table: Optional[ObjectiveTable] = None) -> str:
    return (table or get_objective_table()).instruction


def get_refactoring_objective(
    rule_ids: Union[str, Iterable[str]], table: Optional[ObjectiveTable] = None
) -> str:
    """
    Objective text for one rule id or a set of them.

    Several rules produce their distinct objectives joined in rule-id order.
    """
    table = table or get_objective_table()
    if isinstance(rule_ids, str):
        return table.objective_for(rule_ids)

    texts = []
    for rule_id in sorted(set(rule_ids)):
        text = table.objective_for(rule_id)
        if text not in texts:
            texts.append(text)
    if not texts:
        return table.objective_for(DEFAULT_OBJECTIVE_KEY)
    return " ".join(texts)
