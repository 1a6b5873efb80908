"""
Prompt rendering for the itinerary generator.

The generator is asked to answer in two sections, free text after
``REASONING:`` and a bare JSON array after ``RESULT:``. The stream
classifier and result extractor in ``stream.py`` parse the same markers,
so both sides import them from here.
"""

from typing import List, Union

from .schemas import Activity, Hotel, Preferences


REASONING_MARKER = "REASONING:"
RESULT_MARKER = "RESULT:"

SYSTEM_INSTRUCTION = (
    f"Expert trip planner. Format: {REASONING_MARKER} [thoughts] {RESULT_MARKER} [JSON only]"
)

DURATION_MINUTES = {
    "Full Day": 480,
    "Half Day": 240,
}
DEFAULT_DURATION_MINUTES = 180


def duration_minutes(duration: str) -> int:
    return DURATION_MINUTES.get(duration, DEFAULT_DURATION_MINUTES)


def format_number(value: Union[int, float, None]) -> str:
    # 10.0 -> "10", 12.5 -> "12.5"
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_activity_list(activities: List[Activity]) -> str:
    # Only the fields the model needs, one line per candidate.
    return "\n".join(
        f"{a.name} | {a.type} | ${format_number(a.price or 0)} | {format_number(a.rating)}★" for a in activities
    )


def build_prompt(mode: str, hotel: Hotel, activities: List[Activity], preferences: Preferences) -> str:
    activity_list = format_activity_list(activities)
    budget = format_number(preferences.budget)
    max_distance = format_number(preferences.maxDistance)

    if mode == "quick":
        return (
            f"Activities near {hotel.name}:\n"
            f"{activity_list}\n"
            "\n"
            f"Budget: ${budget} | Max distance: {max_distance}mi | Time: {preferences.duration}\n"
            "\n"
            "Think step-by-step, then recommend 5 best activities.\n"
            "\n"
            "Format:\n"
            f"{REASONING_MARKER} [brief thoughts on selection criteria, variety, and budget fit]\n"
            f'{RESULT_MARKER} [{{"name":"...","type":"...","time_needed_minutes":90,"why_chosen":"..."}}]\n'
            "\n"
            f"Output ONLY JSON after {RESULT_MARKER} - no extra text."
        )

    minutes = duration_minutes(preferences.duration)
    return (
        f"Itinerary from {hotel.name}:\n"
        "\n"
        "Activities:\n"
        f"{activity_list}\n"
        "\n"
        f"Budget: ${budget} | Distance: {max_distance}mi | Duration: {minutes}min | Start: 9AM\n"
        "\n"
        "Plan an efficient route with no backtracking. Consider grouping, timing, budget, and travel.\n"
        "\n"
        "Format:\n"
        f"{REASONING_MARKER} [routing logic, time allocation, budget strategy, trade-offs]\n"
        f'{RESULT_MARKER} [{{"time":"9:00 AM","activity":"...","type":"...","duration_minutes":90,'
        '"travel_time_minutes":10,"cost":25,"notes":"..."}]\n'
        "\n"
        f"Output ONLY JSON after {RESULT_MARKER} - no extra text or markdown."
    )
