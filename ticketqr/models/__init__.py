# Carrega módulos para registrar tabelas no metadata:
import ticketqr.models.scan  # noqa: F401

__all__: list[str] = []
