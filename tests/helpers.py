"""Shared helpers for the API and repository tests."""
import asyncio
import sqlite3

FOTO = "aGVsbG8gZmFjZQ=="


class FakeFaceMatcher:
    """Stands in for FaceMatchClient; answers with a fixed decision."""

    def __init__(self, match: bool = True):
        self.match = match
        self.calls = []

    async def compare(self, reference_photo: str, captured_photo: str) -> bool:
        self.calls.append((reference_photo, captured_photo))
        return self.match

    async def aclose(self) -> None:
        pass


def usuario_payload(**overrides):
    payload = {
        "nombres": "María José",
        "apellidos": "Gómez Peña",
        "cedula": "12345678",
        "correo": "a@b.com",
        "telefono": "3001234567",
        "contrasena": "Abcdef1!",
        "foto": FOTO,
    }
    payload.update(overrides)
    return payload


def fetch(db_path, sql, params=()):
    """Read rows straight from a store's SQLite file."""
    conn = sqlite3.connect(str(db_path))
    try:
        return conn.execute(sql, params).fetchall()
    finally:
        conn.close()


def recording_thread(func, calls):
    """Wrap ``func`` so each call records whether it ran on the event loop."""
    def wrapper(*args):
        try:
            asyncio.get_running_loop()
            calls.append("event loop")
        except RuntimeError:
            calls.append("worker thread")
        return func(*args)
    return wrapper
