"""Run the investigation reducer: timers, photo lookups, random notifications."""

import logging
import random

from api.flow_loader import get_flow
from api.investigation import (
    NOTIFICATIONS_TIMER,
    LookupPhoto,
    SessionState,
    initial_state,
    reduce,
)
from api.timers import TimerScheduler
from api.xstate_machine import get_machine
from profilescan.application import PhotoLookupService

logger = logging.getLogger(__name__)


class InvestigationSession:
    """One user's walk through the stages. Single-threaded; time moves via advance()."""

    def __init__(
        self,
        lookup_service: PhotoLookupService,
        *,
        machine: dict | None = None,
        flow: dict | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._lookup = lookup_service
        self._machine = machine if machine is not None else get_machine()
        self._flow = flow if flow is not None else get_flow()
        self._rng = rng or random.Random()
        self._state = initial_state(self._flow)
        self.scheduler = TimerScheduler()
        # Phones sent to the lookup service, in order (no debounce).
        self.lookups: list[str] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def flow(self) -> dict:
        return self._flow

    def _dispatch(self, event: dict) -> list:
        event = self._with_notification_pick(event)
        self._state, actions = reduce(self._state, event, self._machine, self._flow)
        return actions

    def _with_notification_pick(self, event: dict) -> dict:
        payload = event.get("payload") or {}
        if event.get("type") != "TICK" or payload.get("timer") != NOTIFICATIONS_TIMER:
            return event
        offer = self._flow.get("offer") or {}
        users = offer.get("users") or []
        actions = offer.get("actions") or []
        if not users or not actions:
            return event
        picked = {
            **payload,
            "user": self._rng.choice(users),
            "action": self._rng.choice(actions),
        }
        return {**event, "payload": picked}

    def _perform(self, actions: list) -> None:
        for action in actions:
            if isinstance(action, LookupPhoto):
                self.lookups.append(action.phone)
                result = self._lookup.lookup(action.phone)
                self.send({"type": "PHOTO_LOADED", "payload": result.to_dict()})
            else:
                logger.warning("Unhandled session action: %r", action)

    def send(self, event: dict) -> SessionState:
        """Apply a user event and run its effects. Returns the new state."""
        rest = self.scheduler.apply(self._dispatch(event))
        self._perform(rest)
        return self._state

    def advance(self, ms: int) -> SessionState:
        """Let ms milliseconds pass, firing timers in order."""
        rest = self.scheduler.advance(ms, self._dispatch)
        self._perform(rest)
        return self._state

    def set_field(self, name: str, value) -> SessionState:
        return self.send({"type": "SET_FIELD", "payload": {"field": name, "value": value}})
