from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Tuple
import uuid

from ..exceptions import NotFoundError
from .entidade import Entidade


def agora_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Medium:
    id: str
    nome: str
    entidades: Tuple[Entidade, ...] = ()
    presente: bool = True
    cargo: Optional[str] = None
    criado_em: datetime = field(default_factory=agora_utc)

    @property
    def total_consulentes(self) -> int:
        return sum(e.ocupacao for e in self.entidades)

    def obter_entidade(self, entidade_id: str) -> Entidade:
        for e in self.entidades:
            if e.id == entidade_id:
                return e
        raise NotFoundError("Entidade não encontrada.", medium_id=self.id, entidade_id=entidade_id)

    def substituir_entidade(self, entidade: Entidade) -> "Medium":
        return replace(
            self,
            entidades=tuple(entidade if e.id == entidade.id else e for e in self.entidades),
        )

    def para_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "presente": self.presente,
            "cargo": self.cargo,
            "criado_em": self.criado_em.isoformat(),
            "entidades": [e.para_dict() for e in self.entidades],
        }

    @staticmethod
    def novo(nome: str, entidades: Tuple[Entidade, ...], cargo: Optional[str] = None) -> "Medium":
        return Medium(
            id=str(uuid.uuid4()),
            nome=nome.strip(),
            entidades=tuple(entidades),
            cargo=cargo,
        )
