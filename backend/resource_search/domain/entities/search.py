from dataclasses import dataclass

from .training_resource import TrainingResource


@dataclass(frozen=True)
class SearchHit:
    """A served resource paired with its cosine similarity to the query."""

    resource: TrainingResource
    score: float
