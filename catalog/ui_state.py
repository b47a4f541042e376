"""Small closed state machines for per-session UI state.

MenuState    = MenuClosed | MenuOpen(entry_id)
PlaybackState = Idle | Playing(entry_id, video_id)

Stored in the session cookie as plain dicts via to_dict()/from_dict().
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional, Union

from youtube.extractor import embed_url

COPY_NOTICE_SECONDS = 2.0


@dataclass(frozen=True)
class MenuClosed:
    def to_dict(self) -> dict:
        return {"state": "closed"}


@dataclass(frozen=True)
class MenuOpen:
    entry_id: str

    def to_dict(self) -> dict:
        return {"state": "open", "entry_id": self.entry_id}


MenuState = Union[MenuClosed, MenuOpen]


def toggle_menu(state: MenuState, entry_id: str) -> MenuState:
    """Open the share menu for entry_id, or close it if it is already open there."""
    if isinstance(state, MenuOpen) and state.entry_id == entry_id:
        return MenuClosed()
    return MenuOpen(entry_id)


def menu_from_dict(data: Optional[dict]) -> MenuState:
    if data and data.get("state") == "open" and data.get("entry_id"):
        return MenuOpen(str(data["entry_id"]))
    return MenuClosed()


@dataclass(frozen=True)
class Idle:
    def to_dict(self) -> dict:
        return {"state": "idle"}


@dataclass(frozen=True)
class Playing:
    entry_id: str
    video_id: str

    @property
    def embed_url(self) -> str:
        return embed_url(self.video_id)

    def to_dict(self) -> dict:
        return {"state": "playing", "entry_id": self.entry_id, "video_id": self.video_id}


PlaybackState = Union[Idle, Playing]


def playback_from_dict(data: Optional[dict]) -> PlaybackState:
    if data and data.get("state") == "playing" and data.get("entry_id") and data.get("video_id"):
        return Playing(str(data["entry_id"]), str(data["video_id"]))
    return Idle()


@dataclass(frozen=True)
class CopyNotice:
    """Transient "copied" acknowledgment after a share link was handed out."""
    copied_at: float
    duration: float = COPY_NOTICE_SECONDS

    def is_active(self, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        return 0 <= now - self.copied_at < self.duration

    def remaining(self, now: Optional[float] = None) -> float:
        now = time.time() if now is None else now
        return max(0.0, self.duration - (now - self.copied_at))
