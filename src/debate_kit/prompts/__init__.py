from .prompt import Prompt
from .prompts_library import DEFAULT_PROMPTS_DIR, PromptsLibrary

__all__ = ["DEFAULT_PROMPTS_DIR", "Prompt", "PromptsLibrary"]
