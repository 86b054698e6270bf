"""
Stage transitions backed by xstate-python.

flows/investigation_machine.json is plain XState JSON (id, initial, states
with on: { EVENT: target }), so it also opens in Stately Studio. A stage
marked "type": "final" accepts no events.
"""

import copy
import json
import logging
import os
from pathlib import Path

from xstate.machine import Machine

logger = logging.getLogger(__name__)

MACHINE_FILE = "investigation_machine.json"


def _repo_root() -> Path:
    return Path(__file__).resolve().parent.parent.parent


def get_machine_path() -> Path:
    override = os.environ.get("XSTATE_MACHINE_PATH", "").strip()
    if override:
        return Path(override).resolve()
    return _repo_root() / "flows" / MACHINE_FILE


def load_machine(path: Path | None = None) -> dict:
    """Read and check a machine config. Every transition target must be a declared stage."""
    if path is None:
        path = get_machine_path()
    config = json.loads(path.read_text(encoding="utf-8"))
    missing = [key for key in ("id", "initial", "states") if key not in config]
    if missing:
        raise ValueError(f"Machine is missing {', '.join(missing)}")
    states = config["states"]
    if config["initial"] not in states:
        raise ValueError(f"initial '{config['initial']}' must be a state")
    for stage, node in states.items():
        for event, target in ((node or {}).get("on") or {}).items():
            if target not in states:
                raise ValueError(f"{stage} --{event}--> unknown stage '{target}'")
    return config


# machine id -> (config snapshot, Machine built from it)
_built: dict[str, tuple[dict, Machine]] = {}


def _built_machine(config: dict) -> Machine:
    cached = _built.get(config["id"])
    if cached is not None and cached[0] == config:
        return cached[1]
    snapshot = copy.deepcopy(config)
    instance = Machine(config)
    _built[config["id"]] = (snapshot, instance)
    return instance


def is_final(machine: dict, stage: str) -> bool:
    node = (machine.get("states") or {}).get(stage) or {}
    return node.get("type") == "final"


def accepts(machine: dict, stage: str, event: str) -> bool:
    """True if stage declares a transition for event."""
    if is_final(machine, stage):
        return False
    node = (machine.get("states") or {}).get(stage) or {}
    return event in (node.get("on") or {})


def transition(machine: dict, stage: str, event: str) -> str | None:
    """Next stage for (stage, event), or None when the event does not move the machine."""
    if not accepts(machine, stage, event):
        return None
    try:
        instance = _built_machine(machine)
        next_stage = instance.transition(instance.state_from(stage), event).value
    except (ValueError, KeyError) as e:
        logger.warning("xstate rejected %s in %s: %s", event, stage, e)
        return None
    return None if next_stage == stage else next_stage


_loaded: dict[Path, dict] = {}


def get_machine(cache: bool = True) -> dict:
    """Machine config for the current XSTATE_MACHINE_PATH, loaded once per path."""
    path = get_machine_path()
    if not cache or path not in _loaded:
        _loaded[path] = load_machine(path)
    return _loaded[path]
