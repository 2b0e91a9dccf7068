import typing
from dataclasses import fields, is_dataclass

from ooxmlviewer.inspector.data_types import ArchiveEntry, ArchiveSummary

# Type marker key used for serialization/deserialization
_TYPE_KEY = "_type"

_TYPE_REGISTRY: dict[str, type] = {
    cls.__name__: cls for cls in (ArchiveEntry, ArchiveSummary)
}


def _serialize_for_json(value: typing.Any) -> typing.Any:
    if is_dataclass(value) and not isinstance(value, type):
        result = {
            _TYPE_KEY: type(value).__name__,
        }
        for item in fields(value):
            result[item.name] = _serialize_for_json(getattr(value, item.name))
        return result
    if isinstance(value, dict):
        return {str(key): _serialize_for_json(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_for_json(item) for item in value]
    return value


def serialize_summary(summary: ArchiveSummary) -> dict:
    """Tagged, JSON-safe representation of a summary."""
    return _serialize_for_json(summary)


def summary_to_host_value(summary: ArchiveSummary) -> dict:
    """
    Plain record handed across the host boundary.

    Shape: ``{"entries": [{"path", "is_dir", "size", "content"}, ...]}``
    with ``content`` set to None where no text was decoded.
    """
    return summary.to_dict()


def _deserialize_value(value: typing.Any) -> typing.Any:
    if isinstance(value, dict):
        if _TYPE_KEY in value:
            return _deserialize_dataclass(value)
        return {key: _deserialize_value(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_deserialize_value(item) for item in value]
    return value


def _deserialize_dataclass(data: dict) -> typing.Any:
    type_name = data[_TYPE_KEY]
    cls = _TYPE_REGISTRY.get(type_name)
    if cls is None:
        raise ValueError(f"Unknown type for deserialization: {type_name}")

    field_names = {f.name for f in fields(cls)}
    kwargs = {
        name: _deserialize_value(data[name]) for name in field_names if name in data
    }
    return cls(**kwargs)


def deserialize_summary(data: dict) -> ArchiveSummary:
    """
    Deserialize a JSON dictionary back to an ArchiveSummary.

    This is the inverse of serialize_summary().

    Raises:
        ValueError: If the data is not a tagged ArchiveSummary payload
    """
    if not isinstance(data, dict):
        raise ValueError("Input must be a dictionary")

    if _TYPE_KEY not in data:
        raise ValueError(
            f"Input dictionary must contain '{_TYPE_KEY}' key for deserialization"
        )

    summary = _deserialize_dataclass(data)
    if not isinstance(summary, ArchiveSummary):
        raise ValueError(f"Expected ArchiveSummary, got {data[_TYPE_KEY]}")
    return summary
