import os
from pathlib import Path

from dotenv import load_dotenv

from .domain.taxonomia import CATEGORIAS_PADRAO

# .env na raiz do projeto
env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _lista(valor, padrao):
    if not valor:
        return tuple(padrao)
    return tuple(v.strip() for v in valor.split(",") if v.strip())


DB_PATH = os.getenv("GIRA_DB_PATH", os.path.join(os.path.dirname(__file__), "data.db"))

# Ordem das categorias = ordem de exibição das entidades
CATEGORIAS = _lista(os.getenv("GIRA_CATEGORIAS"), CATEGORIAS_PADRAO)

# Ordem dos cargos = prioridade dos médiuns na lista de agendamento
CARGOS = _lista(os.getenv("GIRA_CARGOS"), ("Dirigente", "Pai Pequeno", "Mãe Pequena", "Ogã", "Cambone"))

HISTORICO_LIMITE = int(os.getenv("GIRA_HISTORICO_LIMITE", "50"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = _lista(os.getenv("CORS_ORIGINS"), ("*",))
