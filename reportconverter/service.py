"""Template use cases and conversion of stored templates to responses."""

import uuid

from reportconverter.entity import Template
from reportconverter.repository import TemplateRepository
from reportconverter.schemas import TemplateRequest, TemplateResponse


def to_response(template: Template, base_url: str) -> TemplateResponse:
    """Describe a stored template, with its path made public under ``base_url``."""
    template_type = getattr(template.template_type, "value", template.template_type)
    return TemplateResponse(
        id=str(template.id),
        name=template.name,
        template_type=str(template_type),
        path=f"{base_url}/{template.path}",
        path_original=template.path,
    )


class TemplateService:
    """Creates, lists, finds and deletes templates."""

    def __init__(self, repository: TemplateRepository, base_url: str):
        self._repository = repository
        self._base_url = base_url

    def create_template(self, request: TemplateRequest) -> TemplateResponse:
        """Store a template described by the request."""
        template = Template(
            name=request.name,
            template_type=request.template_type,
            path=request.path,
        )
        created = self._repository.create_template(template)
        return to_response(created, self._base_url)

    def find_all_templates(self) -> list[TemplateResponse]:
        """All templates that have not been deleted."""
        return [
            to_response(template, self._base_url)
            for template in self._repository.find_all_templates()
        ]

    def find_template_by_id(self, template_id: str) -> TemplateResponse | None:
        """The template with this id, or None; a malformed id raises ValueError."""
        template = self._repository.find_template_by_id(uuid.UUID(template_id))
        if template is None:
            return None
        return to_response(template, self._base_url)

    def delete_template_by_id(self, template_id: str) -> None:
        """Delete the template; a malformed id raises ValueError."""
        self._repository.delete_template_by_id(uuid.UUID(template_id))