from functools import lru_cache
from typing import Optional

from ticketqr.core.config import QRConfig, settings
from ticketqr.db.session import get_db  # noqa: F401  (reexport p/ rotas)
from ticketqr.services.issuer import QRIssuer
from ticketqr.services.usage import TicketUsageRecorder
from ticketqr.services.validator import QRValidator

# ----------------------------------------------------------------------
# Uma única QRConfig por processo: issuer e validator compartilham a mesma
# chave e a mesma largura de janela
# ----------------------------------------------------------------------
@lru_cache
def get_qr_config() -> QRConfig:
    return QRConfig.from_settings(settings)

@lru_cache
def get_issuer() -> QRIssuer:
    return QRIssuer(get_qr_config())

@lru_cache
def get_validator() -> QRValidator:
    return QRValidator(get_qr_config())

# ----------------------------------------------------------------------
# "Marcar ingresso como usado" pertence ao sistema de reservas;
# sobrescreva via app.dependency_overrides quando houver um
# ----------------------------------------------------------------------
def get_usage_recorder() -> Optional[TicketUsageRecorder]:
    return None
