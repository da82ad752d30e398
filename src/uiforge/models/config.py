"""
Model descriptors with strong typing.
Catalog of the Gemini variants a round can fan out to.
"""

from pydantic import BaseModel, ConfigDict, Field


class ModelDescriptor(BaseModel):
    """Type-safe description of one selectable model."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    version: str
    model_string: str = Field(description="Backend model identifier")
    short_name: str
    thinking_capable: bool = False
    thinking: bool = False
    image_output: bool = False

    @property
    def disables_thinking(self) -> bool:
        """Capable models running without thinking must be told so explicitly."""
        return self.thinking_capable and not self.thinking


MODELS: dict[str, ModelDescriptor] = {
    "flash_thinking": ModelDescriptor(
        key="flash_thinking",
        name="Flash",
        version="2.5",
        model_string="gemini-2.5-flash",
        short_name="Flash",
        thinking_capable=True,
        thinking=True,
    ),
    "flash": ModelDescriptor(
        key="flash",
        name="Flash (thinking off)",
        version="2.5",
        model_string="gemini-2.5-flash",
        short_name="Flash",
        thinking_capable=True,
        thinking=False,
    ),
}


def get_model(key: str) -> ModelDescriptor:
    """Look up a model descriptor by key."""
    try:
        return MODELS[key]
    except KeyError:
        raise KeyError(f"Unknown model '{key}'. Available: {', '.join(MODELS)}") from None
