"""csv-codec: schema-driven CSV serialization for dataclass and pydantic records."""

__version__ = "0.1.0"
