from .models import Citation, ExpertReadings, ExpertTopic
from .recommender import ReadingRecommender, extract_json_from_markdown, mock_readings

__all__ = [
    "Citation",
    "ExpertReadings",
    "ExpertTopic",
    "ReadingRecommender",
    "extract_json_from_markdown",
    "mock_readings",
]
