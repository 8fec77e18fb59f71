from __future__ import annotations
from dataclasses import dataclass, replace
import uuid

from ..enums import StatusConsulente


@dataclass(frozen=True)
class Consulente:
    id: str
    nome: str
    status: StatusConsulente = StatusConsulente.AGENDADO

    def com_status(self, status: StatusConsulente) -> "Consulente":
        return replace(self, status=status)

    def renomeado(self, nome: str) -> "Consulente":
        return replace(self, nome=nome)

    def para_dict(self) -> dict:
        return {"id": self.id, "nome": self.nome, "status": self.status.value}

    @staticmethod
    def novo(nome: str) -> "Consulente":
        return Consulente(id=str(uuid.uuid4()), nome=nome.strip())
