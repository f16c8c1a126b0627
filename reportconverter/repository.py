"""Persistence of templates with soft deletion."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from reportconverter.database import Database
from reportconverter.entity import Template, jakarta_now


class TemplateRepository:
    """Stores and retrieves templates; deleted rows are hidden, not removed."""

    def __init__(self, database: Database, logger: logging.Logger | None = None):
        self._database = database
        self._logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _live_by_id(template_id: uuid.UUID):
        return select(Template).where(
            Template.id == template_id, Template.deleted_at.is_(None)
        )

    def create_template(self, template: Template) -> Template:
        """Insert the template and return it with its id and timestamps set."""
        try:
            with self._database.session() as session:
                session.add(template)
        except SQLAlchemyError:
            self._logger.exception("Failed to create template")
            raise
        return template

    def find_all_templates(self) -> list[Template]:
        """Return every template that has not been deleted."""
        try:
            with self._database.session() as session:
                return list(
                    session.scalars(select(Template).where(Template.deleted_at.is_(None)))
                )
        except SQLAlchemyError:
            self._logger.exception("Failed to find all templates")
            raise

    def find_template_by_id(self, template_id: uuid.UUID) -> Template | None:
        """Return the template with this id, or None if there is none."""
        try:
            with self._database.session() as session:
                template = session.scalars(self._live_by_id(template_id)).first()
        except SQLAlchemyError:
            self._logger.exception("Failed to find template by ID")
            raise
        if template is None:
            self._logger.error("Template not found")
        return template

    def delete_template_by_id(self, template_id: uuid.UUID) -> None:
        """Mark the template as deleted; a missing template is not an error."""
        try:
            with self._database.session() as session:
                template = session.scalars(self._live_by_id(template_id)).first()
                if template is None:
                    self._logger.error("Template not found")
                    return
                template.deleted_at = jakarta_now()
        except SQLAlchemyError:
            self._logger.exception("Failed to delete template")
            raise