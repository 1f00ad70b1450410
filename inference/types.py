from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union

MODEL_NAMESPACE = "models/"

ModelSource = Literal["static", "discovery"]


def normalize_model_id(identifier: str) -> str:
    """Add the provider namespace prefix if missing. Idempotent."""
    identifier = identifier.strip()
    if identifier.startswith(MODEL_NAMESPACE):
        return identifier
    return f"{MODEL_NAMESPACE}{identifier}"


@dataclass(frozen=True)
class ModelCandidate:
    identifier: str
    normalized: str

    @classmethod
    def from_identifier(cls, identifier: str) -> "ModelCandidate":
        return cls(identifier=identifier, normalized=normalize_model_id(identifier))


@dataclass(frozen=True)
class GenerationRequest:
    system_instruction: str
    user_message: str
    target: ModelCandidate


@dataclass(frozen=True)
class Success:
    reply_text: str
    model: Optional[str] = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    status_code: Optional[int] = None
    cause: Optional[str] = None     # timeout | transport_error | invalid_json | malformed_response | all_candidates_failed
    error_body: Optional[str] = None
    model: Optional[str] = None
    attempts: List["Failure"] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code}"
        return self.cause or "unknown"


GenerationOutcome = Union[Success, Failure]
