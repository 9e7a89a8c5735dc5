from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid axis configuration, tagged with the offending axis and field."""

    def __init__(self, message: str, *, axis: str | None = None, field: str | None = None) -> None:
        self.axis = axis
        self.field = field
        prefix = ""
        if axis is not None and field is not None:
            prefix = f"{axis}.{field}: "
        elif axis is not None:
            prefix = f"{axis}: "
        elif field is not None:
            prefix = f"{field}: "
        super().__init__(prefix + message)
