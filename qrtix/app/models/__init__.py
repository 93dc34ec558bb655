from qrtix.app.models.usuario import Usuario
from qrtix.app.models.venta import Venta
from qrtix.app.models.login_log import LoginLog

__all__ = ["Usuario", "Venta", "LoginLog"]
