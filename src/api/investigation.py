"""
Investigation stage machine: (state, event) -> (state, actions).

The reducer never sleeps, fetches or schedules anything itself. It returns
StartTimer/StopTimer/LookupPhoto actions and the session (api.session) runs
them. Every stage change stops all active timers before the next stage's
timers start.
"""

import logging
import math
from dataclasses import dataclass, field, fields, replace

from api.flow_loader import get_flow, get_stage
from api.timers import StartTimer, StopTimer
from api.xstate_machine import get_machine, transition
from profilescan.domain import MIN_PHONE_DIGITS, InvestigationTarget
from profilescan.infrastructure.phone import compose_phone

logger = logging.getLogger(__name__)

STAGE_EVENTS = frozenset({"NEXT", "START_ANALYSIS", "ANALYSIS_COMPLETE"})
TARGET_FIELDS = frozenset(f.name for f in fields(InvestigationTarget))

ANALYSIS_TIMER = "analysis"
ANALYSIS_DONE_TIMER = "analysis_done"
COUNTDOWN_TIMER = "countdown"
NOTIFICATIONS_TIMER = "notifications"
MISSED_MATCH_SHOW_TIMER = "missed_match_show"
MISSED_MATCH_HIDE_TIMER = "missed_match_hide"

OFFER_STAGE = "offer"

DEFAULT_MIN_LOCAL_DIGITS = 8
DEFAULT_COUNTDOWN_SECONDS = 10 * 60
DEFAULT_MAX_NOTIFICATIONS = 5


@dataclass(frozen=True)
class Notification:
    id: int
    user: str
    action: str
    time: str = "Just now"


@dataclass(frozen=True)
class SessionState:
    stage: str
    target: InvestigationTarget = field(default_factory=InvestigationTarget)
    analysis_ticks: int = 0
    analysis_progress: int = 0
    analysis_message: str = ""
    analysis_message_index: int = 0
    animation_frame: int = 0
    time_left: int = 0
    notifications: tuple[Notification, ...] = ()
    notification_seq: int = 0
    show_missed_match: bool = False
    photo_url: str | None = None
    photo_loading: bool = False
    active_timers: frozenset[str] = frozenset()

    @property
    def offer_expired(self) -> bool:
        return self.stage == OFFER_STAGE and self.time_left == 0


@dataclass
class LookupPhoto:
    phone: str


def initial_state(flow: dict | None = None) -> SessionState:
    if flow is None:
        flow = get_flow()
    return SessionState(stage=flow["start_stage"])


def format_time(seconds: int) -> str:
    """Return seconds as MM:SS."""
    minutes, rest = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{rest:02d}"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _timer_config(flow: dict, name: str) -> dict | None:
    for stage in flow.get("stages") or []:
        for timer in stage.get("timers") or []:
            if timer.get("name") == name:
                return timer
    return None


def _enter_stage(
    state: SessionState, next_stage: str, flow: dict
) -> tuple[SessionState, list]:
    """Stop every running timer, reset per-stage data, start the new stage's timers."""
    actions: list = [StopTimer(name=n) for n in sorted(state.active_timers)]
    changes: dict = {"stage": next_stage, "show_missed_match": False}
    if state.stage == flow["start_stage"]:
        changes.update(
            target=InvestigationTarget(), photo_url=None, photo_loading=False
        )
    active: set[str] = set()
    for timer in (get_stage(flow, next_stage) or {}).get("timers") or []:
        name = timer["name"]
        if name == ANALYSIS_TIMER:
            analysis = flow["analysis"]
            changes.update(
                analysis_ticks=0,
                analysis_progress=0,
                analysis_message=analysis.get("initial_message") or "",
                analysis_message_index=0,
                animation_frame=0,
            )
        elif name == COUNTDOWN_TIMER:
            changes["time_left"] = flow["offer"].get(
                "countdown_seconds", DEFAULT_COUNTDOWN_SECONDS
            )
        elif name == NOTIFICATIONS_TIMER:
            changes.update(notifications=(), notification_seq=0)
        actions.append(
            StartTimer(
                name=name,
                interval_ms=timer["interval_ms"],
                repeat=bool(timer.get("repeat")),
            )
        )
        active.add(name)
    changes["active_timers"] = frozenset(active)
    logger.info("Stage %s -> %s", state.stage, next_stage)
    return replace(state, **changes), actions


def _change_stage(
    state: SessionState, event_type: str, machine: dict, flow: dict
) -> tuple[SessionState, list]:
    stage = get_stage(flow, state.stage) or {}
    missing = state.target.missing(stage.get("requires") or [])
    if missing:
        logger.debug("%s blocked in %s, missing %s", event_type, state.stage, missing)
        return state, []
    next_stage = transition(machine, state.stage, event_type)
    if next_stage is None:
        return state, []
    return _enter_stage(state, next_stage, flow)


def _set_field(
    state: SessionState, payload: dict, flow: dict
) -> tuple[SessionState, list]:
    name = payload.get("field")
    stage = get_stage(flow, state.stage) or {}
    if name not in TARGET_FIELDS or not stage.get("editable"):
        return state, []
    value = payload.get("value")
    if name == "file_name":
        value = value or None
    else:
        value = "" if value is None else str(value)
    target = replace(state.target, **{name: value})
    state = replace(state, target=target)

    min_local = flow["lookup"].get("min_local_digits", DEFAULT_MIN_LOCAL_DIGITS)
    should_lookup = (name == "phone_number" and len(value) >= min_local) or (
        name == "country_code" and bool(target.phone_number)
    )
    if not should_lookup:
        return state, []
    phone = compose_phone(target.country_code, target.phone_number)
    if len(phone) < MIN_PHONE_DIGITS:
        return state, []
    return replace(state, photo_loading=True), [LookupPhoto(phone=phone)]


def _photo_loaded(state: SessionState, payload: dict) -> tuple[SessionState, list]:
    result = payload.get("result")
    if payload.get("success") and result:
        return replace(state, photo_url=result, photo_loading=False), []
    return replace(state, photo_loading=False), []


def _analysis_tick(state: SessionState, flow: dict) -> tuple[SessionState, list]:
    analysis = flow["analysis"]
    messages = analysis["messages"]
    interval = _timer_config(flow, ANALYSIS_TIMER)["interval_ms"]
    ticks = state.analysis_ticks + 1
    progress = ticks * interval * 100 / analysis.get("duration_ms", 15000)
    changes: dict = {"analysis_ticks": ticks}
    if progress <= 100:
        changes["analysis_progress"] = min(100, _round_half_up(progress))
        index = math.floor(progress * len(messages) / 100)
        if state.analysis_message_index < index < len(messages):
            changes.update(analysis_message=messages[index], analysis_message_index=index)
        changes["animation_frame"] = ticks
    if progress < 100:
        return replace(state, **changes), []
    changes["active_timers"] = (state.active_timers - {ANALYSIS_TIMER}) | {
        ANALYSIS_DONE_TIMER
    }
    return replace(state, **changes), [
        StopTimer(name=ANALYSIS_TIMER),
        StartTimer(
            name=ANALYSIS_DONE_TIMER,
            interval_ms=analysis.get("complete_delay_ms", 500),
        ),
    ]


def _countdown_tick(state: SessionState) -> tuple[SessionState, list]:
    time_left = max(0, state.time_left - 1)
    if time_left > 0:
        return replace(state, time_left=time_left), []
    return (
        replace(
            state,
            time_left=0,
            active_timers=state.active_timers - {COUNTDOWN_TIMER},
        ),
        [StopTimer(name=COUNTDOWN_TIMER)],
    )


def _notification_tick(
    state: SessionState, payload: dict, flow: dict
) -> tuple[SessionState, list]:
    offer = flow["offer"]
    users = offer.get("users") or ["Someone"]
    actions = offer.get("actions") or [""]
    seq = state.notification_seq + 1
    note = Notification(
        id=seq,
        user=payload.get("user") or users[(seq - 1) % len(users)],
        action=payload.get("action") or actions[(seq - 1) % len(actions)],
    )
    limit = offer.get("max_notifications", DEFAULT_MAX_NOTIFICATIONS)
    notifications = ((note,) + state.notifications)[:limit]
    return replace(state, notifications=notifications, notification_seq=seq), []


def _tick(
    state: SessionState, payload: dict, machine: dict, flow: dict
) -> tuple[SessionState, list]:
    name = payload.get("timer")
    if name not in state.active_timers:
        return state, []
    if name == ANALYSIS_TIMER:
        return _analysis_tick(state, flow)
    if name == COUNTDOWN_TIMER:
        return _countdown_tick(state)
    if name == NOTIFICATIONS_TIMER:
        return _notification_tick(state, payload, flow)

    # One-shot timers: drop from active before acting on them.
    state = replace(state, active_timers=state.active_timers - {name})
    if name == ANALYSIS_DONE_TIMER:
        return _change_stage(state, "ANALYSIS_COMPLETE", machine, flow)
    if name == MISSED_MATCH_SHOW_TIMER:
        return replace(state, show_missed_match=True), []
    if name == MISSED_MATCH_HIDE_TIMER:
        return replace(state, show_missed_match=False), []
    return state, []


def reduce(
    state: SessionState,
    event: dict,
    machine: dict | None = None,
    flow: dict | None = None,
) -> tuple[SessionState, list]:
    """
    Apply one event. Returns (new_state, actions).
    Unknown events, failed guards and ticks of stopped timers change nothing.
    """
    if machine is None:
        machine = get_machine()
    if flow is None:
        flow = get_flow()
    event_type = event.get("type")
    payload = event.get("payload") or {}
    if event_type in STAGE_EVENTS:
        return _change_stage(state, event_type, machine, flow)
    if event_type == "SET_FIELD":
        return _set_field(state, payload, flow)
    if event_type == "PHOTO_LOADED":
        return _photo_loaded(state, payload)
    if event_type == "TICK":
        return _tick(state, payload, machine, flow)
    return state, []
