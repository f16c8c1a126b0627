import io
import uuid
from pathlib import Path

import pytest

from reportconverter.app import create_app
from reportconverter.config import Config, DbConfig, ServerConfig
from reportconverter.database import Database

BASE_URL = "http://localhost:8080"
APP_NAME = "report-converter"


@pytest.fixture
def storage(tmp_path):
    directory = tmp_path / "storage"
    directory.mkdir()
    return directory


@pytest.fixture
def client(tmp_path, storage):
    database = Database(f"sqlite:///{tmp_path / 'app.sqlite'}")
    database.create_all()
    config = Config(server=ServerConfig(port=8080, name=APP_NAME, url=BASE_URL), db=DbConfig())
    app = create_app(config, database, storage_dir=storage)
    return app.test_client()


def _store(client, name="Invoice", template_type="docx", filename="invoice.docx",
           content=b"template-bytes"):
    return client.post(
        "/api/v1/templates/store",
        data={
            "name": name,
            "template_type": template_type,
            "file": (io.BytesIO(content), filename),
        },
        content_type="multipart/form-data",
    )


def test_index_and_app_name_header(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.get_json() == {"message": "Welcome to the User Service API", "status": "OK"}
    assert response.headers["App-Name"] == APP_NAME


def test_health(client):
    response = client.get("/health")
    assert response.get_json() == {"message": "Service is running", "status": "OK"}


def test_list_empty(client):
    response = client.get("/api/v1/templates/")
    body = response.get_json()
    assert response.status_code == 200
    assert body["meta"] == {"code": 200, "status": "success", "message": "No templates found"}
    assert "data" not in body


def test_store_without_file_is_rejected(client):
    response = client.post(
        "/api/v1/templates/store",
        data={"name": "Invoice", "template_type": "docx"},
        content_type="multipart/form-data",
    )
    body = response.get_json()
    assert response.status_code == 400
    assert body["meta"]["status"] == "bad request"
    assert body["meta"]["message"] == "Validation error"
    assert "'File'" in body["data"]


def test_store_saves_file_and_returns_template(client, storage):
    response = _store(client, content=b"abc")
    body = response.get_json()
    assert response.status_code == 201
    assert body["meta"]["message"] == "Template created successfully"
    data = body["data"]
    assert data["name"] == "Invoice"
    assert data["template_type"] == "docx"
    assert data["path"] == BASE_URL + "/" + data["path_original"]
    saved = Path(data["path_original"])
    assert saved.name.endswith("_invoice.docx")
    assert saved.parent == storage / "templates"
    assert saved.read_bytes() == b"abc"
    assert str(uuid.UUID(data["id"])) == data["id"]


def test_stored_file_is_served_statically(client):
    data = _store(client, content=b"static-content").get_json()["data"]
    name = Path(data["path_original"]).name
    response = client.get(f"/storage/templates/{name}")
    assert response.status_code == 200
    assert response.data == b"static-content"


def test_list_find_and_delete(client):
    created = _store(client).get_json()["data"]

    listed = client.get("/api/v1/templates/").get_json()
    assert listed["meta"]["message"] == "Templates found successfully"
    assert listed["data"] == [created]

    found = client.get(f"/api/v1/templates/{created['id']}").get_json()
    assert found["meta"]["message"] == "Template found successfully"
    assert found["data"] == created

    deleted = client.delete(f"/api/v1/templates/{created['id']}")
    assert deleted.status_code == 200
    assert deleted.get_json()["meta"]["message"] == "Template deleted successfully"

    missing = client.get(f"/api/v1/templates/{created['id']}").get_json()
    assert missing["meta"]["message"] == "Template not found"
    assert "data" not in missing


def test_find_with_malformed_id_is_server_error(client):
    response = client.get("/api/v1/templates/not-a-uuid")
    assert response.status_code == 500
    assert response.get_json()["meta"]["status"] == "Failed to find template by ID"


def test_delete_with_malformed_id_is_server_error(client):
    response = client.delete("/api/v1/templates/not-a-uuid")
    assert response.status_code == 500
    assert response.get_json()["meta"]["status"] == "Failed to delete template by ID"


def test_generate_pdf_rejects_invalid_json(client):
    response = client.post(
        "/api/v1/templates/generate-pdf", data="{broken", content_type="application/json"
    )
    assert response.status_code == 400
    assert response.get_json()["meta"]["message"] == "Invalid request"


def test_generate_pdf_unknown_template(client):
    response = client.post(
        "/api/v1/templates/generate-pdf",
        json={"template_id": str(uuid.uuid4()), "data": {}},
    )
    assert response.status_code == 404
    assert response.get_json()["meta"]["message"] == "Template not found"


def test_generate_pdf_requires_docx_template(client):
    created = _store(client, template_type="excel", filename="sheet.xlsx").get_json()["data"]
    response = client.post(
        "/api/v1/templates/generate-pdf", json={"template_id": created["id"], "data": {}}
    )
    assert response.status_code == 400
    assert response.get_json()["meta"]["message"] == "Invalid template type"


def test_generate_pdf_missing_template_file(client):
    created = _store(client).get_json()["data"]
    Path(created["path_original"]).unlink()
    response = client.post(
        "/api/v1/templates/generate-pdf", json={"template_id": created["id"], "data": {}}
    )
    assert response.status_code == 404
    assert response.get_json()["meta"]["message"] == "Template file not found"


def test_generate_pdf_rejects_bad_data_type(client):
    created = _store(client).get_json()["data"]
    response = client.post(
        "/api/v1/templates/generate-pdf",
        json={"template_id": created["id"], "data": {"flag": True}},
    )
    body = response.get_json()
    assert response.status_code == 400
    assert body["meta"]["status"] == "Invalid data type"
    assert body["meta"]["message"] == "Invalid data type for key flag"