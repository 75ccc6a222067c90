import pytest

from debate_kit.topics import ExtractedTopic, generate_fallback_topics, validate_topics
from debate_kit.topics.validation import is_valid_topic


def _topic(title: str = "Carbon Taxes", summary: str = "A fair summary.", confidence: float = 0.7) -> ExtractedTopic:
    return ExtractedTopic(title=title, summary=summary, confidence=confidence)


class TestValidation:
    def test_valid_topic(self) -> None:
        assert is_valid_topic(_topic())

    @pytest.mark.parametrize(
        "topic",
        [
            _topic(title="ab"),
            _topic(title="x" * 121),
            _topic(summary="too short"),
            _topic(summary="x" * 2001),
            _topic(confidence=-0.1),
            _topic(confidence=1.5),
        ],
    )
    def test_out_of_bounds_topics_rejected(self, topic: ExtractedTopic) -> None:
        assert not is_valid_topic(topic)

    def test_boundaries_are_inclusive(self) -> None:
        assert is_valid_topic(_topic(title="abc", summary="x" * 10, confidence=0.0))
        assert is_valid_topic(_topic(title="x" * 120, summary="x" * 2000, confidence=1.0))

    def test_validate_topics_keeps_order_of_survivors(self) -> None:
        topics = [_topic(title="First"), _topic(title="no"), _topic(title="Third")]

        assert [t.title for t in validate_topics(topics)] == ["First", "Third"]


class TestFallbackTopics:
    @pytest.mark.parametrize("source_type", ["pdf", "youtube", "podcast", "general"])
    def test_two_valid_topics_per_source_type(self, source_type: str) -> None:
        topics = generate_fallback_topics("Energy Report", source_type)

        assert len(topics) == 2
        assert [t.confidence for t in topics] == [0.6, 0.5]
        assert validate_topics(topics) == topics
        assert all("Energy Report" in t.title for t in topics)
        assert all(t.arguments for t in topics)

    def test_unknown_source_type_uses_general_framing(self) -> None:
        assert generate_fallback_topics("X Y Z", "newsletter") == generate_fallback_topics(
            "X Y Z", "general"
        )

    def test_blank_name(self) -> None:
        topics = generate_fallback_topics("  ", "pdf")

        assert "this source" in topics[0].title

    def test_long_names_truncated_to_valid_title(self) -> None:
        topics = generate_fallback_topics("n" * 300, "general")

        assert all(len(t.title) <= 120 for t in topics)
        assert validate_topics(topics) == topics
