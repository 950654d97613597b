"""
Domain models for the person ETL job.

`Person` mirrors one row of `resources/schema.sql` minus the surrogate key.
Instances are frozen; the processor always produces a new one.
"""
from __future__ import annotations

from pydantic import BaseModel, Field


class Person(BaseModel):
    """
    A two-field record flowing from the CSV reader to the `people` table.
    """

    first_name: str = Field(..., alias="firstName", description="Given name.")
    last_name: str = Field(..., alias="lastName", description="Family name.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    def __str__(self) -> str:
        return f"firstName: {self.first_name}, lastName: {self.last_name}"

    def as_row(self) -> tuple[str, str]:
        """Column values in insert order."""
        return (self.first_name, self.last_name)


__all__ = ["Person"]
