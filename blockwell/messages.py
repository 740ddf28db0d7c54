"""
Score messages: short-lived text events that rise and then fade out.
"""

from dataclasses import dataclass
from typing import List


@dataclass
class ScoreMessage:
    """A timed text event. Rises for `ascent` frames, then fades for `fade` frames."""
    text: str
    ascent: int
    fade: int
    ascent_total: int = 0
    fade_total: int = 0

    def __post_init__(self):
        self.ascent_total = self.ascent_total or self.ascent
        self.fade_total = self.fade_total or self.fade

    @property
    def expired(self) -> bool:
        return self.ascent <= 0 and self.fade <= 0

    @property
    def offset(self) -> int:
        """Frames risen so far."""
        return self.ascent_total - self.ascent

    @property
    def opacity(self) -> float:
        if self.fade_total == 0:
            return 0.0
        return self.fade / self.fade_total

    def tick(self):
        if self.ascent > 0:
            self.ascent -= 1
        elif self.fade > 0:
            self.fade -= 1


class MessageQueue:
    """Owns live score messages and drops them once expired."""

    def __init__(self, ascent_frames: int = 30, fade_frames: int = 30):
        self.ascent_frames = ascent_frames
        self.fade_frames = fade_frames
        self.messages: List[ScoreMessage] = []

    def push(self, text: str) -> ScoreMessage:
        message = ScoreMessage(text, self.ascent_frames, self.fade_frames)
        self.messages.append(message)
        return message

    def tick(self):
        for message in self.messages:
            message.tick()
        self.messages = [m for m in self.messages if not m.expired]

    def clear(self):
        self.messages = []

    def texts(self) -> List[str]:
        return [m.text for m in self.messages]

    def __len__(self):
        return len(self.messages)
