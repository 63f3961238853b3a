from typing import List, Optional, Dict, Any, Tuple
from pydantic import BaseModel, Field, ValidationError


class ConditionSpec(BaseModel):
    when: str
    conditional: str
    target: str


class NodeSpec(BaseModel):
    id: str
    type: str
    label: Optional[str] = None
    next: List[str] = Field(default_factory=list)

    # trigger nodes
    condition: Optional[ConditionSpec] = None

    # action nodes
    action: Optional[str] = None
    params: Dict[str, Any] = Field(default_factory=dict)


class OptionsSpec(BaseModel):
    halt_on_failure: bool = False
    dry_run: bool = False

    class Config:
        extra = "forbid"


class WorkflowSpec(BaseModel):
    name: str
    description: Optional[str] = None
    options: Optional[OptionsSpec] = None
    nodes: List[NodeSpec] = Field(default_factory=list)

    class Config:
        extra = "forbid"  # unknown top-level keys are almost always typos


def _model_to_dict(model: BaseModel) -> Dict[str, Any]:
    # support for both pydantic v2 and v1
    if hasattr(model, "model_dump"):   # v2
        return model.model_dump()
    return model.dict()                # v1


def validate_workflow(raw: Dict[str, Any]) -> Tuple[WorkflowSpec, Dict[str, Any]]:
    """Validate a raw workflow document against WorkflowSpec."""
    if not isinstance(raw, dict):
        raise ValueError("Workflow document must be a mapping")
    if "options" in raw and isinstance(raw["options"], dict):
        # accept the camelCase spelling used by the editor
        options = dict(raw["options"])
        if "haltOnFailure" in options:
            options["halt_on_failure"] = options.pop("haltOnFailure")
        if "dryRun" in options:
            options["dry_run"] = options.pop("dryRun")
        raw = {**raw, "options": options}
    try:
        if hasattr(WorkflowSpec, "model_validate"):     # v2
            spec = WorkflowSpec.model_validate(raw)
        else:                                           # v1
            spec = WorkflowSpec.parse_obj(raw)
        return spec, _model_to_dict(spec)
    except ValidationError as e:
        raise ValueError(f"Workflow validation error: {e}")
