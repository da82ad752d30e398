"""Per-user playground state read by the orchestrator at submit time."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import MODELS
from .modes import OutputMode

MIN_BATCH_SIZE = 1
MAX_BATCH_SIZE = 9


def _default_versus_models() -> dict[str, bool]:
    return {key: True for key, model in MODELS.items() if not model.image_output}


class PlaygroundOptions(BaseModel):
    """
    Mutable generation options.

    Batch and versus selections are independent: switching modes does not
    reconcile one with the other.
    """

    model_config = ConfigDict(validate_assignment=True, use_enum_values=False)

    output_mode: OutputMode = OutputMode.HTML
    batch_mode: bool = True
    batch_size: int = Field(default=3, ge=MIN_BATCH_SIZE, le=MAX_BATCH_SIZE)
    batch_model: str = Field(default_factory=lambda: next(iter(MODELS)))
    versus_models: dict[str, bool] = Field(default_factory=_default_versus_models)
    temperature: float = Field(default=0.9, ge=0.0, le=1.0)
    use_grounding: bool = False

    @field_validator("batch_model")
    @classmethod
    def validate_batch_model(cls, v: str) -> str:
        if v not in MODELS:
            raise ValueError(f"Unknown model '{v}'")
        return v

    @field_validator("versus_models")
    @classmethod
    def validate_versus_models(cls, v: dict[str, bool]) -> dict[str, bool]:
        unknown = [key for key in v if key not in MODELS]
        if unknown:
            raise ValueError(f"Unknown models: {', '.join(unknown)}")
        return v

    @property
    def enabled_models(self) -> list[str]:
        """Versus-mode models currently switched on, in catalog order."""
        return [key for key, active in self.versus_models.items() if active]
