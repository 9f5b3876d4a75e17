# services/speech.py
import logging
from dataclasses import dataclass

from access_route.app.protocols import SpeechEngine, Utterance

log = logging.getLogger("access_route.speech")


@dataclass(frozen=True)
class SpeechOptions:
    rate: float = 0.9  # slightly slow for clarity
    pitch: float = 1.0
    volume: float = 1.0


class _LoggedUtterance:
    def __init__(self, text: str):
        self.text = text
        self.done = True

    def cancel(self) -> None:
        self.done = True


class LoggingSpeechEngine(SpeechEngine):
    """Headless engine: utterances go to the log and finish immediately."""

    def say(self, text: str, *, rate: float, pitch: float, volume: float) -> Utterance:
        log.info("speak: %s", text)
        return _LoggedUtterance(text)


class SpeechChannel:
    """
    Owned speech output with at most one active utterance: speak() cancels
    whatever is still playing before starting the new text.
    """

    def __init__(self, engine: SpeechEngine, options: SpeechOptions | None = None):
        self.engine = engine
        self.options = options or SpeechOptions()
        self._active: Utterance | None = None

    @property
    def active(self) -> Utterance | None:
        if self._active is not None and self._active.done:
            self._active = None
        return self._active

    def speak(self, text: str, options: SpeechOptions | None = None) -> Utterance:
        self.cancel()
        o = options or self.options
        self._active = self.engine.say(text, rate=o.rate, pitch=o.pitch, volume=o.volume)
        return self._active

    def cancel(self) -> None:
        if self._active is not None and not self._active.done:
            self._active.cancel()
        self._active = None

    def close(self) -> None:
        self.cancel()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
