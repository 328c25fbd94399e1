"""Cypher query data model."""

from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Query(BaseModel):
    """
    An immutable Cypher statement with its named parameters.

    Parameter values are passed to the driver as-is.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Cypher statement")
    parameters: Dict[str, Any] = Field(
        default_factory=dict,
        description="Named parameters referenced as $name in the statement",
    )

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        """Reject empty statements."""
        if not v.strip():
            raise ValueError("Query text must not be empty")
        return v

    @classmethod
    def of(
        cls,
        query: Union[str, "Query"],
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> "Query":
        """
        Normalize a statement string or Query into a Query.

        Explicit parameters are merged over the Query's own parameters.
        """
        if isinstance(query, Query):
            if not parameters:
                return query
            return cls(text=query.text, parameters={**query.parameters, **parameters})
        return cls(text=query, parameters=dict(parameters or {}))

    def preview(self, length: int = 100) -> str:
        """Get the statement truncated for log output."""
        text = " ".join(self.text.split())
        if len(text) <= length:
            return text
        return f"{text[:length]}..."
