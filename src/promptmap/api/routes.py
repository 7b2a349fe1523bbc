"""API routes for promptmap."""

from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..cube import DataTable
from ..mapping import (
    FieldCatalog,
    FieldMapping,
    MappingNotFoundError,
    MappingStore,
    build_overview,
    compute_stats,
    merge_mappings,
    suggest_mappings,
)
from ..placeholders import Placeholder, TemplateRenderer, detect_placeholders
from ..validation import SelectionValidator, ValidationConfig, describe_selection

router = APIRouter()


def get_sessions():
    """Get the global session persistence instance."""
    from .app import get_sessions as _get_sessions

    return _get_sessions()


def get_evaluator():
    """Get the evaluator configured for this process."""
    from .app import get_evaluator as _get_evaluator

    return _get_evaluator()


class DetectRequest(BaseModel):
    """Request to detect placeholders in a prompt pair."""

    system_prompt: str = ""
    user_prompt: str = ""


class SuggestRequest(BaseModel):
    """Request to suggest fields for detected placeholders."""

    placeholders: list[Placeholder]
    catalog: FieldCatalog


class MergeRequest(BaseModel):
    """Request to merge fresh suggestions with saved mappings."""

    detected: list[FieldMapping]
    persisted: list[FieldMapping] = Field(default_factory=list)
    auto_map: bool = True


class AnalyzeRequest(BaseModel):
    """Request to run detection, matching and merging in one step."""

    system_prompt: str = ""
    user_prompt: str = ""
    table: DataTable = Field(default_factory=DataTable)
    persisted: list[FieldMapping] = Field(default_factory=list)


class EditRequest(AnalyzeRequest):
    """Request to apply one edit to an analyzed mapping list."""

    placeholder: str = ""
    action: str  # "set", "clear", "keep_as_text" or "auto_map"
    field_name: Optional[str] = None


class RenderRequest(BaseModel):
    """Request to render a prompt template."""

    prompt_text: str
    mappings: list[FieldMapping] = Field(default_factory=list)
    table: DataTable = Field(default_factory=DataTable)


class ComposeRequest(BaseModel):
    """Request to compose the full generation prompt."""

    system_prompt: str = ""
    user_prompt: str = ""
    mappings: list[FieldMapping] = Field(default_factory=list)
    table: DataTable = Field(default_factory=DataTable)


class ValidateRequest(BaseModel):
    """Request to validate the current selection."""

    table: DataTable = Field(default_factory=DataTable)
    config: ValidationConfig = Field(default_factory=ValidationConfig)


class SessionSaveRequest(BaseModel):
    """Request to save an editing session."""

    system_prompt: str = ""
    user_prompt: str = ""
    field_mappings: list[FieldMapping] = Field(default_factory=list)


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "promptmap"}


@router.post("/placeholders/detect")
async def detect(request: DetectRequest):
    """Detect {{field}} placeholders in a system/user prompt pair."""
    placeholders = detect_placeholders(request.system_prompt, request.user_prompt)
    return {
        "placeholders": [p.model_dump(mode="json") for p in placeholders],
        "count": len(placeholders),
    }


@router.post("/mappings/suggest")
async def suggest(request: SuggestRequest):
    """Suggest a catalog field for each placeholder."""
    mappings = suggest_mappings(request.placeholders, request.catalog)
    return {"mappings": [m.model_dump(mode="json") for m in mappings]}


@router.post("/mappings/merge")
async def merge(request: MergeRequest):
    """
    Merge suggestions with saved mappings.

    Returns:
    - One mapping per distinct placeholder
    - Resolution statistics
    """
    mappings = merge_mappings(request.detected, request.persisted, auto_map=request.auto_map)
    return {
        "mappings": [m.model_dump(mode="json") for m in mappings],
        "stats": compute_stats(mappings).model_dump(),
    }


@router.post("/mappings/analyze")
async def analyze(request: AnalyzeRequest):
    """
    Detect, match and merge in one step.

    Returns:
    - The merged mapping list
    - The mapping panel view model
    """
    store = MappingStore(persisted=request.persisted)
    mappings = store.refresh(
        request.system_prompt,
        request.user_prompt,
        FieldCatalog.from_table(request.table),
    )
    return {
        "mappings": [m.model_dump(mode="json") for m in mappings],
        "overview": build_overview(
            mappings, auto_map_threshold=store.matcher.auto_map_threshold
        ).model_dump(mode="json"),
    }


@router.post("/mappings/edit")
async def edit_mapping(request: EditRequest):
    """
    Apply one user edit to the analyzed mapping list.

    Actions: "set" (requires field_name), "clear", "keep_as_text",
    "auto_map".
    """
    store = MappingStore(persisted=request.persisted)
    store.refresh(
        request.system_prompt,
        request.user_prompt,
        FieldCatalog.from_table(request.table),
    )

    try:
        if request.action == "set":
            if not request.field_name:
                raise HTTPException(status_code=400, detail="field_name is required for 'set'")
            store.set_mapping(request.placeholder, request.field_name)
        elif request.action == "clear":
            store.clear_mapping(request.placeholder)
        elif request.action == "keep_as_text":
            store.mark_keep_as_text(request.placeholder)
        elif request.action == "auto_map":
            store.auto_map_high_confidence()
        else:
            raise HTTPException(status_code=400, detail=f"Unknown action: {request.action}")
    except MappingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    mappings = store.mappings
    return {
        "mappings": [m.model_dump(mode="json") for m in mappings],
        "stats": store.resolution_stats().model_dump(),
    }


@router.post("/prompts/render")
async def render(request: RenderRequest):
    """Render a prompt template against the supplied data table."""
    rendered = TemplateRenderer().render(request.prompt_text, request.mappings, request.table)
    return {"rendered": rendered}


@router.post("/prompts/compose")
async def compose(request: ComposeRequest):
    """Compose the full prompt, including the data context block."""
    prompt = TemplateRenderer().compose_prompt(
        request.system_prompt, request.user_prompt, request.mappings, request.table
    )
    return {"prompt": prompt}


@router.post("/selection/validate")
async def validate(request: ValidateRequest):
    """
    Validate the current selection.

    Evaluator failures fall back to table inspection, so this endpoint
    answers with a result rather than an error.
    """
    validator = SelectionValidator(evaluator=get_evaluator())
    result = await validator.validate(request.table, request.config)
    return {
        "result": result.model_dump(mode="json"),
        "summary": describe_selection(request.table, result),
    }


@router.put("/sessions/{key}")
async def save_session(key: str, request: SessionSaveRequest):
    """Save an editing session."""
    sessions = get_sessions()
    try:
        state = await sessions.save(
            key, request.system_prompt, request.user_prompt, request.field_mappings
        )
    except Exception as e:
        raise HTTPException(status_code=400, detail=str(e))
    return state.model_dump(mode="json")


@router.get("/sessions/{key}")
async def load_session(key: str):
    """Load a saved editing session."""
    sessions = get_sessions()
    state = await sessions.load(key)
    if state is None:
        raise HTTPException(status_code=404, detail=f"No saved session '{key}'")
    return state.model_dump(mode="json")


@router.post("/sessions/sweep")
async def sweep_sessions():
    """Delete sessions past the retention window."""
    deleted = await get_sessions().sweep()
    return {"deleted": deleted}
