from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple


@dataclass(frozen=True)
class ResumoMedium:
    medium_nome: str
    atendidos: int


@dataclass(frozen=True)
class RegistroGira:
    """Registro histórico de uma gira encerrada. Nunca é alterado."""

    id: str
    data: datetime
    resumo: Tuple[ResumoMedium, ...]
    total_atendidos: int

    def para_dict(self) -> dict:
        return {
            "id": self.id,
            "data": self.data.isoformat(),
            "resumo": [{"medium_nome": r.medium_nome, "atendidos": r.atendidos} for r in self.resumo],
            "total_atendidos": self.total_atendidos,
        }
