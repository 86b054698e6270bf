"""Load and validate the YAML stage definition. Used by the investigation reducer."""

import os
from pathlib import Path

import yaml


def _repo_root() -> Path:
    """Return repo root (parent of src)."""
    return Path(__file__).resolve().parent.parent.parent


def get_flow_path() -> Path:
    """Return path to the stage YAML (FLOW_PATH env or flows/investigation.yaml)."""
    default = _repo_root() / "flows" / "investigation.yaml"
    path = os.environ.get("FLOW_PATH", "").strip()
    if path:
        return Path(path).resolve()
    return default


def load_flow(path: Path | None = None) -> dict:
    """Load flow YAML and return the flow dict. Validates minimal structure."""
    if path is None:
        path = get_flow_path()
    raw = path.read_text(encoding="utf-8")
    flow = yaml.safe_load(raw)
    if not isinstance(flow, dict):
        raise ValueError("Flow YAML must be a dict")
    if "stages" not in flow or not flow["stages"]:
        raise ValueError("Flow must have a non-empty 'stages' list")
    if "start_stage" not in flow:
        raise ValueError("Flow must have 'start_stage'")
    stage_ids = [s["id"] for s in flow["stages"] if isinstance(s, dict) and "id" in s]
    if len(stage_ids) != len(flow["stages"]):
        raise ValueError("Every stage must have 'id'")
    if len(set(stage_ids)) != len(stage_ids):
        raise ValueError("Stage ids must be unique")
    if flow["start_stage"] not in stage_ids:
        raise ValueError(f"start_stage '{flow['start_stage']}' must be a stage id")
    timer_names: set[str] = set()
    for stage in flow["stages"]:
        for timer in stage.get("timers") or []:
            name = timer.get("name") if isinstance(timer, dict) else None
            if not name:
                raise ValueError(f"Stage '{stage['id']}' has a timer without 'name'")
            if name in timer_names:
                raise ValueError(f"Timer '{name}' is declared twice")
            timer_names.add(name)
            interval = timer.get("interval_ms")
            if not isinstance(interval, int) or interval <= 0:
                raise ValueError(f"Timer '{name}' needs a positive 'interval_ms'")
    analysis = flow.setdefault("analysis", {})
    if not analysis.get("messages"):
        raise ValueError("Flow 'analysis' must have a non-empty 'messages' list")
    flow.setdefault("lookup", {})
    flow.setdefault("offer", {})
    return flow


def stage_ids(flow: dict) -> list[str]:
    """Return stage ids in declared order."""
    return [s["id"] for s in flow["stages"]]


def get_stage(flow: dict, stage_id: str) -> dict | None:
    for s in flow.get("stages") or []:
        if isinstance(s, dict) and s.get("id") == stage_id:
            return s
    return None


# Module-level cache for loaded flow
_flow_cache: dict | None = None


def get_flow(cache: bool = True) -> dict:
    """Load flow (cached by default). Pass cache=False to reload."""
    global _flow_cache
    if cache and _flow_cache is not None:
        return _flow_cache
    _flow_cache = load_flow()
    return _flow_cache
