# qrtix/app/schemas/venta.py
from qrtix.app.schemas.common import RequestBody


class VentaIn(RequestBody):
    nombre: str = ""
    cedula: str = ""
    telefono: str = ""
    direccion: str = ""
    correo: str = ""
    zona: str = ""
    # Strict: "2" and true are type errors; total still accepts JSON integers
    cantidad: int = 0
    total: float = 0.0

    def faltan_campos(self) -> bool:
        """True when a required field is empty or an amount is not positive."""
        requeridos = (self.nombre, self.cedula, self.correo, self.telefono, self.zona)
        return any(not v.strip() for v in requeridos) or self.cantidad <= 0 or self.total <= 0
