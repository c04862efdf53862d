# ==============================================
# Features
# ==============================================
#
# PURPOSE:
#   Named scalar descriptors computed for a segment by the
#   (external) feature extractor. The persistence layer only
#   stores and combines them.
#
# CLASSES:
# --------
# - Feature (frozen dataclass)
#     name: str     → single token, no whitespace (it is written
#                     space-separated in the features file)
#     value: float
#
# - Features
#     Ordered list of Feature. Name uniqueness is NOT enforced.
#     Supports concatenation (+=) and replacement.
#
# - FeatureMergePolicy (Enum)
#     What to do when features are imported into a segment
#     that already has some: CONCATENATE, REPLACE or ABORT.
#
# ==============================================

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Union


class FeatureMergePolicy(Enum):
    """
    Behaviour when a segment receiving features already holds some.

    - CONCATENATE: append the new features after the existing ones
    - REPLACE: discard the existing features, keep the new ones
    - ABORT: stop the whole import with a fatal error
    """
    CONCATENATE = "concatenate"
    REPLACE = "replace"
    ABORT = "abort"

    @classmethod
    def from_name(cls, name: str) -> "FeatureMergePolicy":
        """
        Parse a policy from its (case-insensitive) name.

        Raises:
            ValueError: If the name is not one of the known policies.
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ", ".join(policy.value for policy in cls)
            raise ValueError(
                f"Unknown feature merge policy '{name}'. Expected one of: {valid}"
            ) from None


@dataclass(frozen=True)
class Feature:
    """A single named feature value."""
    name: str
    value: float

    def __post_init__(self):
        if not self.name or any(c.isspace() for c in self.name):
            raise ValueError(f"Feature name must be a non-empty token, got {self.name!r}")


class Features:
    """Ordered sequence of features belonging to one segment."""

    def __init__(self, features: Optional[Iterable[Feature]] = None):
        self._features: List[Feature] = list(features) if features else []

    def push_back(self, feature: Feature) -> None:
        self._features.append(feature)

    def add(self, name: str, value: float) -> None:
        self._features.append(Feature(name, float(value)))

    def names(self) -> List[str]:
        return [feature.name for feature in self._features]

    def values(self) -> List[float]:
        return [feature.value for feature in self._features]

    def empty(self) -> bool:
        return not self._features

    def merge(self, other: "Features", policy: FeatureMergePolicy) -> None:
        """
        Combine another feature set into this one.

        Args:
            other: Features to bring in
            policy: CONCATENATE appends, REPLACE overwrites

        Raises:
            ValueError: For ABORT, which has no merge semantics. The
                caller decides how to abort.
        """
        if policy is FeatureMergePolicy.CONCATENATE:
            self._features.extend(other)
        elif policy is FeatureMergePolicy.REPLACE:
            self._features = list(other)
        else:
            raise ValueError(f"Cannot merge features with policy {policy.name}")

    def __iadd__(self, other: Union["Features", Iterable[Feature]]) -> "Features":
        self._features.extend(other)
        return self

    def __iter__(self) -> Iterator[Feature]:
        return iter(self._features)

    def __len__(self) -> int:
        return len(self._features)

    def __getitem__(self, index: int) -> Feature:
        return self._features[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, Features):
            return self._features == other._features
        return NotImplemented

    def __repr__(self) -> str:
        return f"Features({self._features!r})"
