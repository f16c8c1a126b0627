from http import HTTPStatus

from reportconverter.schemas import (
    GeneratePDFRequest,
    TemplateRequest,
    TemplateResponse,
    UploadedFile,
    bad_request_response,
    error_response,
    format_response,
    success_response,
)


def _response():
    return TemplateResponse(
        id="id-1",
        name="invoice",
        template_type="docx",
        path="http://localhost/storage/a.docx",
        path_original="storage/a.docx",
    )


def test_to_dict_uses_wire_names():
    assert _response().to_dict() == {
        "id": "id-1",
        "name": "invoice",
        "template_type": "docx",
        "path": "http://localhost/storage/a.docx",
        "path_original": "storage/a.docx",
    }


def test_data_omitted_when_none():
    body = format_response(200, "success", "ok")
    assert body == {"meta": {"code": 200, "status": "success", "message": "ok"}}


def test_empty_string_data_is_kept():
    body = success_response(200, "m", "")
    assert body["data"] == ""


def test_success_serialises_responses():
    body = success_response(HTTPStatus.CREATED, "Template created successfully", [_response()])
    assert body["meta"]["code"] == 201
    assert body["meta"]["status"] == "success"
    assert body["data"] == [_response().to_dict()]


def test_bad_request_envelope():
    body = bad_request_response("Validation error", "details")
    assert body["meta"] == {"code": 400, "status": "bad request", "message": "Validation error"}
    assert body["data"] == "details"


def test_error_response_has_no_data():
    body = error_response(HTTPStatus.NOT_FOUND, "Template not found", "Template not found")
    assert "data" not in body
    assert body["meta"]["code"] == 404
    assert body["meta"]["message"] == "Template not found"


def test_request_defaults():
    request = TemplateRequest(name="n", template_type="docx", file=UploadedFile("a.docx", b"x"))
    assert request.path == ""
    assert request.file.filename == "a.docx"
    assert GeneratePDFRequest().data is None