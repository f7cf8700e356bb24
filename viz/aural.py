"""
Spoken form of a traffic-information solution, played on a background
pyttsx3 worker.

    "KLM1734, traffic, 2 o'clock, 5 miles, ..., 1000 feet above, ..."
 -> "Kilo Lima Mike one seven three four, traffic, two o'clock, five miles,
     ..., one thousand feet above, ..."
"""
from __future__ import annotations
import logging
import queue
import re
import threading
from typing import Optional

from trafficinfo.catalog import MIL_CALLS, TRAINING_CALLS
from trafficinfo.models import Exercise

logger = logging.getLogger(__name__)

DIGIT_WORDS = {
    "0": "zero",
    "1": "one",
    "2": "two",
    "3": "three",
    "4": "four",
    "5": "five",
    "6": "six",
    "7": "seven",
    "8": "eight",
    "9": "niner",
}

NUMBER_WORDS = [
    "zero", "one", "two", "three", "four", "five", "six", "seven", "eight",
    "nine", "ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen",
]

PHONETIC = {
    "A": "Alfa", "B": "Bravo", "C": "Charlie", "D": "Delta", "E": "Echo",
    "F": "Foxtrot", "G": "Golf", "H": "Hotel", "I": "India", "J": "Juliett",
    "K": "Kilo", "L": "Lima", "M": "Mike", "N": "November", "O": "Oscar",
    "P": "Papa", "Q": "Quebec", "R": "Romeo", "S": "Sierra", "T": "Tango",
    "U": "Uniform", "V": "Victor", "W": "Whiskey", "X": "X-ray",
    "Y": "Yankee", "Z": "Zulu",
}

# callsign words spoken as words; every other letter run is spelled
CALLSIGN_WORDS = frozenset(TRAINING_CALLS) | frozenset(MIL_CALLS)


def _digits_to_words(digits: str) -> str:
    return " ".join(DIGIT_WORDS.get(d, d) for d in digits)


def _small_number(n: int) -> str:
    if 0 <= n < len(NUMBER_WORDS):
        return NUMBER_WORDS[n]
    return _digits_to_words(str(n))


def altitude_words(feet: int) -> str:
    """2500 -> 'two thousand five hundred', 11000 -> 'one one thousand'."""
    thousands, rest = divmod(int(feet), 1000)
    hundreds = rest // 100
    parts = []
    if thousands:
        parts.append(f"{_digits_to_words(str(thousands))} thousand")
    if hundreds:
        parts.append(f"{DIGIT_WORDS[str(hundreds)]} hundred")
    return " ".join(parts) or "zero"


def spoken_callsign(callsign: str) -> str:
    words = []
    for run in re.findall(r"[A-Z]+|\d+", callsign.upper()):
        if run.isdigit():
            words.append(_digits_to_words(run))
        elif run in CALLSIGN_WORDS:
            words.append(run.capitalize())
        else:
            words.extend(PHONETIC[ch] for ch in run)
    return " ".join(words)


def _normalize_clock(text: str) -> str:
    pattern = re.compile(r"\b(\d{1,2}) o'clock\b")
    return pattern.sub(lambda m: f"{_small_number(int(m.group(1)))} o'clock", text)


def _normalize_miles(text: str) -> str:
    pattern = re.compile(r"\b(\d+) (miles?)\b")
    return pattern.sub(lambda m: f"{_small_number(int(m.group(1)))} {m.group(2)}", text)


def _normalize_feet(text: str) -> str:
    pattern = re.compile(r"\b(\d+) feet\b")
    return pattern.sub(lambda m: f"{altitude_words(int(m.group(1)))} feet", text)


def normalize_phrase(text: str) -> str:
    return _normalize_feet(_normalize_miles(_normalize_clock(text)))


def spoken_solution(exercise: Exercise) -> str:
    text = exercise.solution
    callsign = exercise.target.callsign
    if not text.startswith(callsign):
        return normalize_phrase(text)
    return spoken_callsign(callsign) + normalize_phrase(text[len(callsign):])


class AuralReadout:
    """Queues phrases to a pyttsx3 engine on a daemon thread (started on first use)."""

    def __init__(self, rate: int = 180, volume: float = 1.0) -> None:
        self.rate = rate
        self.volume = volume
        self._queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    def _worker(self) -> None:
        import pyttsx3
        engine = pyttsx3.init()
        engine.setProperty("rate", self.rate)
        engine.setProperty("volume", self.volume)
        while True:
            text = self._queue.get()
            if text is None:
                self._queue.task_done()
                break
            engine.say(text)
            engine.runAndWait()
            self._queue.task_done()

    def speak(self, text: str) -> None:
        if self._thread is None:
            self._thread = threading.Thread(target=self._worker, daemon=True)
            self._thread.start()
        logger.debug("speaking: %s", text)
        self._queue.put(text)

    def speak_exercise(self, exercise: Exercise) -> None:
        self.speak(spoken_solution(exercise))

    def close(self) -> None:
        if self._thread is not None:
            self._queue.put(None)
            self._thread.join(timeout=2.0)
            self._thread = None
