from enum import Enum


class StatusConsulente(str, Enum):
    AGENDADO = "agendado"
    ATENDIDO = "atendido"
    AUSENTE = "ausente"
