"""HTTP application exposing template management and PDF generation."""

import io
import logging
import time
from http import HTTPStatus
from pathlib import Path
from typing import Any

from flask import Flask, jsonify, request, send_file, send_from_directory
from sqlalchemy.exc import SQLAlchemyError

from reportconverter.config import Config
from reportconverter.database import Database
from reportconverter.document import DocumentError, process_document, stringify_data
from reportconverter.entity import TemplateType
from reportconverter.repository import TemplateRepository
from reportconverter.schemas import (
    GeneratePDFRequest,
    TemplateRequest,
    UploadedFile,
    bad_request_response,
    error_response,
    success_response,
)
from reportconverter.service import TemplateService
from reportconverter.validation import ValidationError, validate_template_request

_STATIC_ENDPOINT = "storage"


def _reply(body: dict[str, Any]):
    return jsonify(body), body["meta"]["code"]


class _TemplateHandler:
    """Request handlers for the template routes."""

    def __init__(self, service: TemplateService, logger: logging.Logger, storage: Path):
        self._service = service
        self._log = logger
        self._storage = storage

    def create_template(self):
        self._log.info("Creating template")
        upload = request.files.get("file")
        template_request = TemplateRequest(
            name=request.form.get("name", ""),
            template_type=request.form.get("template_type", ""),
            file=UploadedFile(upload.filename or "", upload.read()) if upload else None,
            path=request.form.get("path", ""),
        )
        try:
            validate_template_request(template_request)
        except ValidationError as exc:
            self._log.error("Validation error: %s", exc)
            return _reply(bad_request_response("Validation error", str(exc)))

        if template_request.file is not None:
            filename = Path(template_request.file.filename).name
            target = self._storage / "templates" / f"{time.time_ns()}_{filename}"
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(template_request.file.content)
            except OSError as exc:
                self._log.error("failed to save cover file: %s", exc)
                return _reply(
                    error_response(
                        HTTPStatus.INTERNAL_SERVER_ERROR, "failed to save cover file", str(exc)
                    )
                )
            template_request.file = None
            template_request.path = target.as_posix()

        try:
            created = self._service.create_template(template_request)
        except (ValueError, SQLAlchemyError) as exc:
            self._log.error("Failed to create template: %s", exc)
            return _reply(
                error_response(
                    HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to create template", str(exc)
                )
            )
        return _reply(
            success_response(HTTPStatus.CREATED, "Template created successfully", created)
        )

    def find_all_templates(self):
        self._log.info("Finding all templates")
        try:
            templates = self._service.find_all_templates()
        except SQLAlchemyError as exc:
            self._log.error("Failed to find all templates: %s", exc)
            return _reply(
                error_response(
                    HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to find all templates", str(exc)
                )
            )
        if not templates:
            return _reply(success_response(HTTPStatus.OK, "No templates found"))
        return _reply(success_response(HTTPStatus.OK, "Templates found successfully", templates))

    def find_template_by_id(self, template_id: str):
        self._log.info("Finding template by ID")
        try:
            template = self._service.find_template_by_id(template_id)
        except (ValueError, SQLAlchemyError) as exc:
            self._log.error("Failed to find template by ID: %s", exc)
            return _reply(
                error_response(
                    HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to find template by ID", str(exc)
                )
            )
        if template is None:
            return _reply(success_response(HTTPStatus.OK, "Template not found"))
        return _reply(success_response(HTTPStatus.OK, "Template found successfully", template))

    def delete_template_by_id(self, template_id: str):
        self._log.info("Deleting template by ID")
        try:
            self._service.delete_template_by_id(template_id)
        except (ValueError, SQLAlchemyError) as exc:
            self._log.error("Failed to delete template by ID: %s", exc)
            return _reply(
                error_response(
                    HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to delete template by ID", str(exc)
                )
            )
        return _reply(success_response(HTTPStatus.OK, "Template deleted successfully"))

    @staticmethod
    def _parse_generate_request() -> GeneratePDFRequest:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise ValueError("request body must be a JSON object")
        template_id = body.get("template_id", "")
        if template_id is None:
            template_id = ""
        if not isinstance(template_id, str):
            raise ValueError("template_id must be a string")
        data = body.get("data")
        if data is not None and not isinstance(data, dict):
            raise ValueError("data must be a JSON object")
        return GeneratePDFRequest(template_id=template_id, data=data)

    def generate_pdf(self):
        try:
            pdf_request = self._parse_generate_request()
        except ValueError as exc:
            self._log.error("Failed to bind JSON: %s", exc)
            return _reply(bad_request_response("Invalid request", str(exc)))

        try:
            template = self._service.find_template_by_id(pdf_request.template_id)
        except (ValueError, SQLAlchemyError) as exc:
            self._log.error("Failed to find template by ID: %s", exc)
            return _reply(
                error_response(
                    HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to find template", str(exc)
                )
            )
        if template is None:
            self._log.error("Template not found")
            return _reply(
                error_response(HTTPStatus.NOT_FOUND, "Template not found", "Template not found")
            )
        if template.template_type != TemplateType.DOCX.value:
            self._log.error("Invalid template type")
            return _reply(
                error_response(
                    HTTPStatus.BAD_REQUEST, "Invalid template type", "Invalid template type"
                )
            )

        template_path = Path(template.path_original)
        if not template_path.exists():
            self._log.error("Template file does not exist: %s", template_path)
            return _reply(
                error_response(
                    HTTPStatus.NOT_FOUND, "Template file not found", "Template file not found"
                )
            )

        try:
            data = stringify_data(pdf_request.data or {})
        except TypeError as exc:
            self._log.error("%s", exc)
            return _reply(error_response(HTTPStatus.BAD_REQUEST, "Invalid data type", str(exc)))

        try:
            pdf_path = process_document(template_path, data, self._storage / "generated_pdf")
        except DocumentError as exc:
            self._log.error("Failed to process document %s", exc)
            return _reply(
                error_response(
                    HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to process document", str(exc)
                )
            )
        try:
            content = pdf_path.read_bytes()
        finally:
            pdf_path.unlink(missing_ok=True)
        return send_file(
            io.BytesIO(content), mimetype="application/pdf", download_name=pdf_path.name
        )


def create_app(
    config: Config,
    database: Database,
    logger: logging.Logger | None = None,
    storage_dir="storage",
) -> Flask:
    """Build the web application with its routes wired to ``database``."""
    log = logger or logging.getLogger(__name__)
    storage = Path(storage_dir)
    service = TemplateService(TemplateRepository(database, log), config.server.url)
    handler = _TemplateHandler(service, log, storage)

    app = Flask(__name__, static_folder=None)

    @app.route("/storage/<path:filename>", endpoint=_STATIC_ENDPOINT)
    def serve_storage(filename):
        return send_from_directory(storage.resolve(), filename)

    @app.after_request
    def add_app_name(response):
        if request.endpoint != _STATIC_ENDPOINT:
            response.headers["App-Name"] = config.server.name
        return response

    @app.get("/")
    def index():
        return jsonify({"message": "Welcome to the User Service API", "status": "OK"})

    @app.get("/health")
    def health():
        return jsonify({"message": "Service is running", "status": "OK"})

    prefix = "/api/v1/templates/"
    app.add_url_rule(
        prefix + "store", "create_template", handler.create_template, methods=["POST"]
    )
    app.add_url_rule(
        prefix + "generate-pdf", "generate_pdf", handler.generate_pdf, methods=["POST"]
    )
    app.add_url_rule(prefix, "find_all_templates", handler.find_all_templates, methods=["GET"])
    app.add_url_rule(
        prefix + "<template_id>",
        "find_template_by_id",
        handler.find_template_by_id,
        methods=["GET"],
    )
    app.add_url_rule(
        prefix + "<template_id>",
        "delete_template_by_id",
        handler.delete_template_by_id,
        methods=["DELETE"],
    )
    return app