"""
Tests for login and the identity-check endpoints.

Run with: pytest tests/test_auth_api.py -v
"""
from unittest.mock import AsyncMock, patch

from qrtix.app.db.repositories import StoreError, UsuarioRepository
from qrtix.app.security import hashing
from tests.helpers import FOTO, fetch, recording_thread


def login(client, cedula="12345678", contrasena="Abcdef1!", foto="captura64"):
    return client.post("/login", json={"cedula": cedula, "contrasena": contrasena, "foto": foto})


class TestLogin:

    def test_successful_login_is_logged_in_both_stores(
            self, client, registered, face_matcher, primary_db, mirror_db
    ):
        response = login(client)

        assert response.status_code == 200
        assert response.json() == {"success": True, "mensaje": "Inicio de sesión exitoso"}
        assert face_matcher.calls == [(FOTO, "captura64")]
        for db in (primary_db, mirror_db):
            assert fetch(db, "SELECT cedula FROM logs") == [("12345678",)]

    def test_wrong_password_and_unknown_user_look_the_same(self, client, registered, face_matcher):
        wrong_password = login(client, contrasena="Otra1234!")
        unknown_user = login(client, cedula="99999999")

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json() == {
            "success": False, "error": "Cédula o contraseña incorrecta"
        }
        assert face_matcher.calls == []

    def test_face_mismatch_has_its_own_message(self, client, registered, face_matcher, primary_db):
        face_matcher.match = False

        response = login(client)

        assert response.status_code == 401
        assert response.json()["error"] == "Verificación facial fallida"
        assert fetch(primary_db, "SELECT * FROM logs") == []
        assert fetch(primary_db, "SELECT ultimaSesion FROM usuarios") == [(None,)]

    def test_password_check_runs_off_the_event_loop(self, client, registered):
        calls = []
        with patch.object(hashing, "verify_password", recording_thread(hashing.verify_password, calls)):
            response = login(client)

        assert response.status_code == 200
        assert calls == ["worker thread"]

    def test_lookup_failure_reads_as_invalid_credentials(self, client, registered):
        broken = AsyncMock(side_effect=StoreError("down"))
        with patch.object(UsuarioRepository, "find_by_cedula", broken):
            response = login(client)

        assert response.status_code == 401
        assert response.json()["error"] == "Cédula o contraseña incorrecta"

    def test_malformed_body_uses_flag_shape(self, client):
        response = client.post(
            "/login", content="not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Datos inválidos"}

    def test_non_string_cedula_is_not_coerced(self, client, registered, face_matcher):
        response = client.post(
            "/login", json={"cedula": 12345678, "contrasena": "Abcdef1!", "foto": "captura64"}
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Datos inválidos"}
        assert face_matcher.calls == []


class TestVerificarCorreo:

    def test_known_email_returns_cedula(self, client, registered):
        response = client.post("/verificar-correo", json={"email": "a@b.com"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "cedula": "12345678"}

    def test_empty_email(self, client):
        response = client.post("/verificar-correo", json={"email": " "})

        assert response.status_code == 400
        assert response.json()["error"] == "El email no puede estar vacío"

    def test_unknown_email(self, client):
        response = client.post("/verificar-correo", json={"email": "nadie@b.com"})

        assert response.status_code == 404

    def test_store_error(self, client):
        broken = AsyncMock(side_effect=StoreError("down"))
        with patch.object(UsuarioRepository, "find_by_correo", broken):
            response = client.post("/verificar-correo", json={"email": "a@b.com"})

        assert response.status_code == 500
        assert response.json()["success"] is False


class TestVerificarRostro:

    def test_matching_face(self, client, registered, face_matcher):
        response = client.post("/verificar-rostro", json={"cedula": "12345678", "foto": "cap64"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "mensaje": "Verificación facial exitosa"}
        assert face_matcher.calls == [(FOTO, "cap64")]

    def test_mismatch(self, client, registered, face_matcher):
        face_matcher.match = False

        response = client.post("/verificar-rostro", json={"cedula": "12345678", "foto": "cap64"})

        assert response.status_code == 401
        assert response.json()["error"] == "Verificación facial fallida"

    def test_missing_photo(self, client, face_matcher):
        response = client.post("/verificar-rostro", json={"cedula": "12345678", "foto": ""})

        assert response.status_code == 400
        assert response.json()["error"] == "La cédula y la foto no pueden estar vacías"
        assert face_matcher.calls == []

    def test_unknown_user(self, client):
        response = client.post("/verificar-rostro", json={"cedula": "99999999", "foto": "cap64"})

        assert response.status_code == 404


class TestActualizarUltimaSesion:

    def test_updates_both_stores(self, client, registered, primary_db, mirror_db):
        response = client.put(
            "/actualizar-ultima-sesion",
            json={"cedula": "12345678", "ultimaSesion": "2026-10-19T15:30:00.000Z"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "mensaje": "Última sesión actualizada con éxito"}
        for db in (primary_db, mirror_db):
            assert fetch(db, "SELECT ultimaSesion FROM usuarios") == [("2026-10-19T15:30:00.000Z",)]

    def test_value_shows_up_in_user_lookup(self, client, registered):
        client.put(
            "/actualizar-ultima-sesion",
            json={"cedula": "12345678", "ultimaSesion": "2026-10-19T15:30:00.000Z"},
        )

        response = client.post("/obtener-usuario", json={"cedula": "12345678"})

        assert response.json()["data"]["ultimaSesion"] == "2026-10-19T15:30:00.000Z"

    def test_missing_date(self, client, registered):
        response = client.put("/actualizar-ultima-sesion", json={"cedula": "12345678"})

        assert response.status_code == 400

    def test_unknown_user(self, client, primary_db):
        response = client.put(
            "/actualizar-ultima-sesion",
            json={"cedula": "99999999", "ultimaSesion": "2026-10-19T15:30:00.000Z"},
        )

        assert response.status_code == 404
        assert fetch(primary_db, "SELECT * FROM usuarios") == []
