"""
Terminal client: walks the investigation stages and triggers photo lookups.
Run: python -m console (from repo root with src on the path, .env or env vars set).
"""
import logging
import os
import time
from pathlib import Path

from dotenv import load_dotenv

# Repo root: from src/console/__main__.py go up to repo root
_REPO_ROOT = Path(__file__).resolve().parent.parent.parent
for path in (_REPO_ROOT / ".env", Path.cwd() / ".env"):
    if path.exists():
        load_dotenv(path)
        break

from api.investigation import format_time
from api.session import InvestigationSession
from profilescan.application import PhotoLookupService
from profilescan.infrastructure import (
    RequestsContactLookupClient,
    format_international,
)

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.WARNING,
)
logger = logging.getLogger(__name__)

FRAME_MS = 150


def _ask(prompt: str) -> str:
    return input(f"{prompt}: ").strip()


def _fill_target(session: InvestigationSession) -> None:
    for name, prompt in (
        ("age", "Age"),
        ("gender", "Gender"),
        ("location", "Location"),
        ("country_code", "Country code (e.g. +34)"),
        ("phone_number", "Phone number"),
    ):
        session.set_field(name, _ask(prompt))
    target = session.state.target
    full = f"{target.country_code}{target.phone_number}"
    print(f"Target phone: {format_international(full) or full}")
    if session.state.photo_url:
        print(f"WhatsApp photo: {session.state.photo_url}")


def _fill_upload(session: InvestigationSession) -> None:
    session.set_field("file_name", _ask("Photo file"))
    session.set_field("handle", _ask("Social handle"))


def _play_analysis(session: InvestigationSession) -> None:
    last_message = None
    while session.state.stage == "analyzing":
        time.sleep(FRAME_MS / 1000)
        session.advance(FRAME_MS)
        state = session.state
        if state.analysis_message != last_message:
            last_message = state.analysis_message
            print(f"\n{last_message}")
        print(f"\r[{state.analysis_progress:3d}%]", end="", flush=True)
    print()


def _play_offer(session: InvestigationSession, seconds: int) -> None:
    for _ in range(seconds):
        time.sleep(1)
        session.advance(1000)
        state = session.state
        latest = state.notifications[0] if state.notifications else None
        line = f"Offer ends in {format_time(state.time_left)}"
        if latest:
            line += f" | {latest.user} {latest.action}"
        print(f"\r{line}", end="", flush=True)
    print()


def main() -> None:
    base_url = os.environ.get("PHOTO_LOOKUP_BASE_URL", "").strip()
    if not base_url:
        logger.error("PHOTO_LOOKUP_BASE_URL not set")
        return
    client = RequestsContactLookupClient(base_url)
    try:
        _run(InvestigationSession(PhotoLookupService(client)))
    finally:
        client.close()


def _run(session: InvestigationSession) -> None:
    while True:
        stage = session.state.stage
        print(f"\n== {stage} ==")
        if stage == "target_details":
            _fill_target(session)
        elif stage == "upload":
            _fill_upload(session)
            session.send({"type": "START_ANALYSIS"})
            if session.state.stage == "upload":
                print("Photo file and handle are required.")
            _play_analysis(session)
            continue
        elif stage == "offer":
            _play_offer(session, seconds=10)
            return
        before = session.state.stage
        started = time.monotonic()
        _ask("Press enter to continue")
        session.advance(int((time.monotonic() - started) * 1000))
        if session.state.show_missed_match:
            print("You missed a match!")
        session.send({"type": "NEXT"})
        if session.state.stage == before:
            print("Some fields are still empty.")


if __name__ == "__main__":
    main()
