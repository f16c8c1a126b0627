"""Validation of incoming request objects."""

from reportconverter.schemas import GeneratePDFRequest, TemplateRequest

_TEMPLATE_TYPES = frozenset({"excel", "pdf"})


class ValidationError(ValueError):
    """Raised when required fields of a request are missing."""

    def __init__(self, struct: str, failures: list[tuple[str, str]]):
        self.struct = struct
        self.failures = list(failures)
        self.fields = [name for name, _ in self.failures]
        super().__init__(
            "\n".join(
                f"Key: '{struct}.{name}' Error:Field validation for '{name}' failed on the '{tag}' tag"
                for name, tag in self.failures
            )
        )


def is_valid_template_type(value) -> bool:
    """True for the template types the ``template_type`` rule accepts."""
    return value in _TEMPLATE_TYPES


def validate_template_request(request: TemplateRequest) -> TemplateRequest:
    """Check that name, type and file are present; return the request."""
    failures = []
    if not request.name:
        failures.append(("Name", "required"))
    if not request.template_type:
        failures.append(("TemplateType", "required"))
    if request.file is None:
        failures.append(("File", "required"))
    if failures:
        raise ValidationError("TemplateRequest", failures)
    return request


def validate_generate_pdf_request(request: GeneratePDFRequest) -> GeneratePDFRequest:
    """Check that a template id and a data mapping are present; return the request."""
    failures = []
    if not request.template_id:
        failures.append(("TemplateID", "required"))
    if request.data is None:
        failures.append(("Data", "required"))
    if failures:
        raise ValidationError("GeneratePDFRequest", failures)
    return request