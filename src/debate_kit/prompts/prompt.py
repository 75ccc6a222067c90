import re

from pydantic import BaseModel

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


class Prompt(BaseModel):
    name: str
    version: str
    description: str
    inputs: dict[str, str]
    template: str

    class Config:
        extra = "forbid"

    def render(self, **values: object) -> str:
        """Substitute ``{{ name }}`` placeholders with the given values.

        Every declared input must be supplied. Unknown keyword arguments
        are rejected so typos surface instead of rendering silently.
        """
        missing = sorted(set(self.inputs) - set(values))
        if missing:
            raise ValueError(
                f"Prompt '{self.name}' missing inputs: {', '.join(missing)}"
            )
        unknown = sorted(set(values) - set(self.inputs))
        if unknown:
            raise ValueError(
                f"Prompt '{self.name}' got unknown inputs: {', '.join(unknown)}"
            )

        return _PLACEHOLDER.sub(lambda m: str(values.get(m.group(1), m.group(0))), self.template)
