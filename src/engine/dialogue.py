"""Guided night-planning dialogue.

A forward-only slot-filling state machine. Each accepted answer fills the
current slot and moves to the next one through a lookup table keyed by
(slot, answer), falling back to the slot's default successor. Answers outside
the current slot's choices leave the state untouched.

Flow:
    companionship -> timing -> plan_shape -> vibe
    vibe=Dinner -> cuisine -> after_dinner
    vibe=<other> -> after_dinner
    after_dinner=Call it a night -> TERMINAL
    after_dinner=<other> -> music_preference -> TERMINAL
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

COMPANIONSHIP = "companionship"
TIMING = "timing"
PLAN_SHAPE = "plan_shape"
VIBE = "vibe"
CUISINE = "cuisine"
AFTER_DINNER = "after_dinner"
MUSIC_PREFERENCE = "music_preference"
TERMINAL = "terminal"

SLOT_CHOICES: dict[str, tuple[str, ...]] = {
    COMPANIONSHIP: ("Just me", "Date", "Friends", "Group"),
    TIMING: ("Tonight", "Tomorrow", "This Weekend"),
    PLAN_SHAPE: ("Just dinner", "Dinner + drinks", "Full night out"),
    VIBE: ("Dinner", "Nightlife", "Lounge", "Something Unique"),
    CUISINE: ("Italian", "Japanese", "Soul Food", "Caribbean", "Mexican", "Surprise Me"),
    AFTER_DINNER: (
        "Keep it light",
        "Go to a lounge",
        "Find a club",
        "Check out events",
        "Call it a night",
    ),
    MUSIC_PREFERENCE: (
        "Hip-Hop",
        "R&B",
        "Afrobeats",
        "Reggaeton",
        "EDM / House",
        "Open Format",
        "Doesn't Matter",
    ),
}

SLOT_QUESTIONS = {
    COMPANIONSHIP: "Who's joining you tonight?",
    TIMING: "When are you planning this?",
    PLAN_SHAPE: "What kind of night are you thinking?",
    VIBE: "What's the vibe?",
    CUISINE: "What kind of food?",
    AFTER_DINNER: "What do you want to do after dinner?",
    MUSIC_PREFERENCE: "What music do you prefer?",
}

DEFAULT_NEXT = {
    COMPANIONSHIP: TIMING,
    TIMING: PLAN_SHAPE,
    PLAN_SHAPE: VIBE,
    VIBE: AFTER_DINNER,
    CUISINE: AFTER_DINNER,
    AFTER_DINNER: MUSIC_PREFERENCE,
    MUSIC_PREFERENCE: TERMINAL,
}

BRANCHES = {
    (VIBE, "Dinner"): CUISINE,
    (AFTER_DINNER, "Call it a night"): TERMINAL,
}

# Wire names expected by the recommendation service.
PAYLOAD_KEYS = {
    COMPANIONSHIP: "who",
    TIMING: "when",
    PLAN_SHAPE: "planType",
    VIBE: "vibe",
    CUISINE: "cuisine",
    AFTER_DINNER: "afterDinner",
    MUSIC_PREFERENCE: "musicPreference",
}


@dataclass(frozen=True)
class DialogueState:
    answers: tuple[tuple[str, str], ...] = ()
    current_slot: str = COMPANIONSHIP

    @property
    def answered_slots(self) -> dict[str, str]:
        return dict(self.answers)

    @property
    def is_terminal(self) -> bool:
        return self.current_slot == TERMINAL

    def to_dict(self) -> dict[str, Any]:
        return {"answered_slots": self.answered_slots, "current_slot": self.current_slot}

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> DialogueState:
        payload = payload or {}
        slots = payload.get("answered_slots") or {}
        current = str(payload.get("current_slot") or COMPANIONSHIP)
        if current != TERMINAL and current not in SLOT_CHOICES:
            raise ValueError(f"Unknown dialogue slot: {current}")
        return cls(
            answers=tuple((str(k), str(v)) for k, v in slots.items()),
            current_slot=current,
        )


@dataclass(frozen=True)
class RecommendationContext:
    companionship: str | None = None
    timing: str | None = None
    plan_shape: str | None = None
    vibe: str | None = None
    cuisine: str | None = None
    after_dinner: str | None = None
    music_preference: str | None = None

    def to_payload(self) -> dict[str, str]:
        return {
            wire: getattr(self, slot)
            for slot, wire in PAYLOAD_KEYS.items()
            if getattr(self, slot) is not None
        }


def start_dialogue() -> DialogueState:
    return DialogueState()


def choices_for(state: DialogueState) -> tuple[str, ...]:
    return SLOT_CHOICES.get(state.current_slot, ())


def question_for(state: DialogueState) -> tuple[str, tuple[str, ...]] | None:
    """Prompt text and choices for the current slot, or None once terminal."""
    if state.is_terminal:
        return None
    return SLOT_QUESTIONS[state.current_slot], choices_for(state)


def next_slot(slot: str, answer: str) -> str:
    return BRANCHES.get((slot, answer), DEFAULT_NEXT[slot])


def advance(state: DialogueState, answer: str) -> DialogueState:
    """Apply one answer. Invalid answers and terminal states are returned as-is."""
    if state.is_terminal or answer not in choices_for(state):
        return state
    return DialogueState(
        answers=(*state.answers, (state.current_slot, answer)),
        current_slot=next_slot(state.current_slot, answer),
    )


def run_dialogue(answers: list[str], state: DialogueState | None = None) -> DialogueState:
    state = state or start_dialogue()
    for answer in answers:
        state = advance(state, answer)
    return state


def build_context(state: DialogueState) -> RecommendationContext:
    if not state.is_terminal:
        raise ValueError(f"Dialogue is not finished; waiting on '{state.current_slot}'.")
    slots = state.answered_slots
    return RecommendationContext(
        companionship=slots.get(COMPANIONSHIP),
        timing=slots.get(TIMING),
        plan_shape=slots.get(PLAN_SHAPE),
        vibe=slots.get(VIBE),
        cuisine=slots.get(CUISINE),
        after_dinner=slots.get(AFTER_DINNER),
        music_preference=slots.get(MUSIC_PREFERENCE),
    )


def build_recommendation_request(context: RecommendationContext, city: str) -> dict[str, Any]:
    return {"city": city, "flow": context.to_payload()}
