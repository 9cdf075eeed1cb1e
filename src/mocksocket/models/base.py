"""Base Pydantic model configuration for mocksocket models.

All mocksocket models inherit from MockSocketBaseModel to ensure consistent behavior:
- Immutability (frozen=True): an event observed by one listener is the event every listener sees
- Strict validation (extra="forbid") to catch typos in option names
- Arbitrary types allowed, since events reference live sockets and options hold callables
"""

from pydantic import BaseModel, ConfigDict


class MockSocketBaseModel(BaseModel):
    """Base model for all mocksocket value objects.

    Example:
        >>> class Frame(MockSocketBaseModel):
        ...     code: int
        >>> Frame(code=1000).code
        1000
        >>> Frame(code=1000, extra=1)
        Traceback (most recent call last):
        ...
        pydantic_core._pydantic_core.ValidationError: ...
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        arbitrary_types_allowed=True,
        validate_default=True,
    )
