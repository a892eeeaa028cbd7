from __future__ import annotations


class ExtractionError(Exception):
    """A file, directory or archive could not be read; the whole run is aborted."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class DocumentParseError(Exception):
    """A single document is not a valid CFDI and is left out of the results."""


class SchemaMismatchError(DocumentParseError):
    """Malformed XML, wrong root element or a missing child section."""


class MissingFieldError(DocumentParseError):
    """A required attribute is absent from an element."""

    def __init__(self, element: str, attribute: str) -> None:
        super().__init__(f"{element}: atributo requerido ausente '{attribute}'")
        self.element = element
        self.attribute = attribute


class InvalidValueError(DocumentParseError):
    """An attribute is present but is not a valid decimal or timestamp."""

    def __init__(self, element: str, attribute: str, value: str) -> None:
        super().__init__(f"{element}: valor inválido en '{attribute}': {value!r}")
        self.element = element
        self.attribute = attribute
        self.value = value


class UnknownTaxKindError(DocumentParseError):
    """Tax code other than 001 (ISR) or 002 (IVA)."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Impuesto no soportado: {code!r}")
        self.code = code
