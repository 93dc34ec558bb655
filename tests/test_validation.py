"""
Tests for user field validation.

Run with: pytest tests/test_validation.py -v
"""
import pytest

from qrtix.app.schemas.usuario import UsuarioIn
from qrtix.app.security.validation import validar_contrasena, validate_usuario
from tests.helpers import usuario_payload


def errores_de(**overrides):
    return validate_usuario(UsuarioIn(**usuario_payload(**overrides)))


class TestValidateUsuario:

    def test_valid_user_has_no_errors(self):
        assert errores_de() == {}

    def test_empty_payload_reports_every_field(self):
        errores = validate_usuario(UsuarioIn())
        assert set(errores) == {
            "nombres", "apellidos", "cedula", "correo", "telefono", "contrasena", "foto"
        }
        assert errores["nombres"] == "El nombre es obligatorio"
        assert errores["cedula"] == "La cédula es obligatoria"

    def test_whitespace_only_counts_as_empty(self):
        errores = errores_de(nombres="   ", foto="  ")
        assert errores["nombres"] == "El nombre es obligatorio"
        assert errores["foto"] == "La foto es obligatoria"

    def test_names_accept_accents_and_spaces(self):
        assert errores_de(nombres="Ñandú Ávila", apellidos="Pérez Núñez") == {}

    def test_names_reject_digits(self):
        assert errores_de(apellidos="Gomez2") == {
            "apellidos": "El apellido solo debe contener letras"
        }

    def test_name_minimum_length(self):
        assert errores_de(nombres="A") == {
            "nombres": "El nombre debe tener al menos 2 caracteres"
        }

    @pytest.mark.parametrize("cedula", ["12345", "123456789012"])
    def test_cedula_length_bounds_are_inclusive(self, cedula):
        assert errores_de(cedula=cedula) == {}

    @pytest.mark.parametrize("cedula", ["1234", "1234567890123"])
    def test_cedula_out_of_bounds(self, cedula):
        assert errores_de(cedula=cedula) == {
            "cedula": "La cédula debe tener entre 5 y 12 dígitos"
        }

    def test_cedula_digits_only(self):
        assert errores_de(cedula="12a45678")["cedula"] == "La cédula solo debe contener números"

    @pytest.mark.parametrize("correo", ["sin-arroba.com", "a@b", "a b@c.com", "a@@b.com"])
    def test_invalid_emails(self, correo):
        assert errores_de(correo=correo) == {"correo": "Ingrese un correo electrónico válido"}

    @pytest.mark.parametrize("telefono,esperado", [
        ("123456", "El teléfono debe tener entre 7 y 15 dígitos"),
        ("1234567890123456", "El teléfono debe tener entre 7 y 15 dígitos"),
        ("300-123-4567", "El teléfono solo debe contener números"),
    ])
    def test_invalid_phones(self, telefono, esperado):
        assert errores_de(telefono=telefono) == {"telefono": esperado}

    def test_phone_bounds_are_inclusive(self):
        assert errores_de(telefono="1234567") == {}
        assert errores_de(telefono="123456789012345") == {}


class TestPasswordRules:

    def test_accepts_all_four_classes(self):
        assert validar_contrasena("Abcdef1!") == ""

    def test_too_short(self):
        assert validar_contrasena("Ab1!xyz") == "La contraseña debe tener al menos 8 caracteres"

    @pytest.mark.parametrize("contrasena", [
        "ABCDEF1!",   # no lowercase
        "abcdef1!",   # no uppercase
        "Abcdefg!",   # no digit
        "Abcdefg1",   # no symbol
    ])
    def test_any_missing_class_rejects(self, contrasena):
        assert "al menos una letra minúscula" in validar_contrasena(contrasena)

    def test_symbol_outside_the_accepted_set_does_not_count(self):
        assert validar_contrasena("Abcdef1_") != ""

    def test_empty(self):
        assert validar_contrasena("") == "La contraseña es obligatoria"
