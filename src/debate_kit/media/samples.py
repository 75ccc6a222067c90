# src/debate_kit/media/samples.py

"""Deterministic stand-in content used when mock data is switched on."""

SAMPLE_TRANSCRIPT = (
    "Climate policy is one of the most important debates of our time. "
    "Supporters argue that carbon pricing should be adopted because research "
    "shows it reduces emissions at the lowest cost. However, critics dispute "
    "the evidence and warn that carbon pricing places a significant burden on "
    "low-income households.\n\n"
    "Renewable energy investment has grown rapidly. Advocates maintain that "
    "governments must accelerate the transition to renewable energy, while "
    "opponents challenge the reliability of wind and solar on the grid. "
    "Although storage costs are falling, the data on grid stability remains "
    "contested."
)


def sample_content(source_type: str, source_name: str) -> str:
    label = {
        "youtube": "Video Title",
        "podcast": "Episode",
    }.get(source_type, "Source")
    return f'{label}: "{source_name}" - {SAMPLE_TRANSCRIPT}'
