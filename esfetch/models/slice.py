"""Slice descriptor for partitioned scrolls."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SliceDescriptor(BaseModel):
    """One partition of a sliced scroll.

    ``max == 1`` means the query is not sliced at all.
    """

    id: int = Field(0, ge=0)
    max: int = Field(1, ge=1)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_id(self) -> "SliceDescriptor":
        """Validate id < max."""
        if self.id >= self.max:
            raise ValueError("slice id must be < max")
        return self

    @property
    def is_sliced(self) -> bool:
        return self.max > 1

    @classmethod
    def partition(cls, count: int) -> list["SliceDescriptor"]:
        """Build descriptors ``(0..count-1, count)`` covering the whole result set."""
        return [cls(id=i, max=count) for i in range(count)]


NO_SLICE = SliceDescriptor()
