from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Tuple
import uuid

from ..exceptions import NotFoundError
from .consulente import Consulente


@dataclass(frozen=True)
class Entidade:
    id: str
    nome: str
    categoria: str
    limite: int
    ordem: int = 0
    disponivel: bool = True
    consulentes: Tuple[Consulente, ...] = ()

    @property
    def ocupacao(self) -> int:
        return len(self.consulentes)

    def obter_consulente(self, consulente_id: str) -> Consulente:
        for c in self.consulentes:
            if c.id == consulente_id:
                return c
        raise NotFoundError(
            "Consulente não encontrado.", entidade_id=self.id, consulente_id=consulente_id
        )

    def com_consulentes(self, consulentes: Tuple[Consulente, ...]) -> "Entidade":
        return replace(self, consulentes=tuple(consulentes))

    def substituir_consulente(self, consulente: Consulente) -> "Entidade":
        return self.com_consulentes(
            tuple(consulente if c.id == consulente.id else c for c in self.consulentes)
        )

    def para_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "categoria": self.categoria,
            "limite": self.limite,
            "ordem": self.ordem,
            "disponivel": self.disponivel,
            "consulentes": [c.para_dict() for c in self.consulentes],
        }

    @staticmethod
    def nova(nome: str, categoria: str, limite: int, ordem: int = 0) -> "Entidade":
        return Entidade(
            id=str(uuid.uuid4()),
            nome=nome.strip(),
            categoria=categoria,
            limite=limite,
            ordem=ordem,
        )
