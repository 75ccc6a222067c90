# src/debate_kit/topics/templates.py

"""Last-resort topics when extraction yields nothing usable.

These are generic and low-confidence on purpose. They only guarantee the
caller has something to start a debate from.
"""

from .models import ExtractedTopic, TopicArgument

_FRAMINGS: dict[str, list[tuple[str, str]]] = {
    "pdf": [
        (
            "Key Arguments in {name}",
            "Examine the central claims made in {name}, whether the evidence "
            "presented supports them, and what a critic would push back on.",
        ),
        (
            "Policy Implications of {name}",
            "Debate what {name} implies for policy and practice, and whether its "
            "recommendations would work outside the context it describes.",
        ),
    ],
    "youtube": [
        (
            "Main Claims in {name}",
            "Assess the main claims made in the video {name}, how well they are "
            "supported, and where viewers might reasonably disagree.",
        ),
        (
            "Persuasion and Evidence in {name}",
            "Discuss whether {name} persuades through evidence or through "
            "presentation, and what a balanced counterpoint would look like.",
        ),
    ],
    "podcast": [
        (
            "Points of Disagreement in {name}",
            "Explore where the host and guests of {name} disagree or hedge, and "
            "which side makes the stronger case.",
        ),
        (
            "Unchallenged Claims in {name}",
            "Identify claims in {name} that went unchallenged during the "
            "conversation and argue both for and against them.",
        ),
    ],
    "general": [
        (
            "Central Question of {name}",
            "Debate the central question raised by {name}, weighing the strongest "
            "argument on each side.",
        ),
        (
            "Broader Impact of {name}",
            "Consider the wider social and practical impact of the ideas in {name} "
            "and whether they hold up under scrutiny.",
        ),
    ],
}

_CONFIDENCES = (0.6, 0.5)


def generate_fallback_topics(source_name: str, source_type: str) -> list[ExtractedTopic]:
    name = source_name.strip() or "this source"
    framings = _FRAMINGS.get(source_type, _FRAMINGS["general"])

    topics = []
    for (title, summary), confidence in zip(framings, _CONFIDENCES, strict=True):
        rendered_title = title.format(name=name)
        if len(rendered_title) > 120:
            rendered_title = rendered_title[:117].rstrip() + "..."
        topics.append(
            ExtractedTopic(
                title=rendered_title,
                summary=summary.format(name=name),
                confidence=confidence,
                arguments=[
                    TopicArgument(
                        claim=f"{rendered_title} deserves scrutiny",
                        evidence=f"Drawn from the content of {name}.",
                    )
                ],
            )
        )
    return topics
