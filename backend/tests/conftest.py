# -*- coding: utf-8 -*-
import os
import sys

# Adiciona o diretório backend ao Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest  # noqa: E402

from gira.db import Database  # noqa: E402
from gira.domain import CATEGORIAS_PADRAO, AgendamentoService, DadosEntidade, EstadoGira, Taxonomia  # noqa: E402
from gira.storage import GiraStore  # noqa: E402

CARGOS = ("Dirigente", "Pai Pequeno", "Ogã")


@pytest.fixture
def taxonomia() -> Taxonomia:
    return Taxonomia.nova(CATEGORIAS_PADRAO, CARGOS)


@pytest.fixture
def servico(taxonomia) -> AgendamentoService:
    return AgendamentoService(taxonomia)


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "gira_test.db")


@pytest.fixture
def store(db_path, taxonomia) -> GiraStore:
    return GiraStore(Database(db_path), taxonomia)


def entidades(*specs):
    """Atalho: entidades(("S1", "Exu", 2), ...)."""
    return [DadosEntidade(nome, categoria, limite) for nome, categoria, limite in specs]


def registrar(servico, estado=None, nome="P1", specs=(("S1", "Exu", 2),), cargo=None):
    resultado = servico.registrar_medium(estado or EstadoGira(), nome, entidades(*specs), cargo)
    return resultado.estado, resultado.valor
