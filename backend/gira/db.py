import json
import logging
import sqlite3
from datetime import datetime
from typing import List, Optional, Tuple

from .domain import DataIntegrityError, RegistroGira, ResumoMedium, validar_registro

logger = logging.getLogger(__name__)

CHAVE_MEDIUMS = "mediums"
CHAVE_CATEGORIAS = "categorias_gira"


class Database:
    """Persistência em SQLite do estado da gira e do histórico de giras encerradas."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._ensure()

    def _connect(self):
        return sqlite3.connect(self.path)

    def _ensure(self) -> None:
        conn = self._connect()
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS estado (
                chave TEXT PRIMARY KEY,
                valor TEXT NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS historico_giras (
                id TEXT PRIMARY KEY,
                data TEXT NOT NULL,
                resumo TEXT NOT NULL,
                total INTEGER NOT NULL
            );
            """
        )
        conn.commit()
        conn.close()

    # --- estado atual ---
    def _ler(self, chave: str):
        conn = self._connect()
        row = conn.execute("SELECT valor FROM estado WHERE chave = ?", (chave,)).fetchone()
        conn.close()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            logger.warning("Valor salvo para %r não é JSON válido; ignorando.", chave)
            return None

    def _gravar(self, chave: str, valor) -> None:
        conn = self._connect()
        conn.execute(
            """
            INSERT INTO estado (chave, valor) VALUES (?, ?)
            ON CONFLICT(chave) DO UPDATE SET valor=excluded.valor;
            """,
            (chave, json.dumps(valor, ensure_ascii=False)),
        )
        conn.commit()
        conn.close()

    def carregar_estado(self) -> Optional[dict]:
        return self._ler(CHAVE_MEDIUMS)

    def salvar_estado(self, dados: dict) -> None:
        self._gravar(CHAVE_MEDIUMS, dados)

    def carregar_categorias(self) -> Optional[list]:
        valor = self._ler(CHAVE_CATEGORIAS)
        if valor is None:
            return None
        if not isinstance(valor, list):
            logger.warning("Categorias da gira salvas em formato desconhecido; ignorando.")
            return None
        invalidas = [c for c in valor if not isinstance(c, str)]
        if invalidas:
            logger.warning("Categorias da gira com formato inválido ignoradas: %r", invalidas)
        return [c for c in valor if isinstance(c, str)]

    def salvar_categorias(self, categorias: Tuple[str, ...]) -> None:
        self._gravar(CHAVE_CATEGORIAS, list(categorias))

    # --- histórico (somente inserção) ---
    def salvar_registro(self, registro: RegistroGira) -> None:
        conn = self._connect()
        conn.execute(
            "INSERT INTO historico_giras (id, data, resumo, total) VALUES (?, ?, ?, ?)",
            (
                registro.id,
                registro.data.isoformat(),
                json.dumps(registro.para_dict()["resumo"], ensure_ascii=False),
                registro.total_atendidos,
            ),
        )
        conn.commit()
        conn.close()

    def listar_registros(self, limite: int) -> List[RegistroGira]:
        conn = self._connect()
        conn.row_factory = sqlite3.Row
        rows = conn.execute(
            "SELECT * FROM historico_giras ORDER BY data DESC, rowid DESC LIMIT ?", (limite,)
        ).fetchall()
        conn.close()

        registros = []
        for row in rows:
            try:
                registro = _registro(row)
                validar_registro(registro)
            except (ValueError, TypeError, KeyError, DataIntegrityError) as err:
                logger.warning("Registro de gira %s ignorado: %s", row["id"], err)
                continue
            registros.append(registro)
        return registros


def _registro(row: sqlite3.Row) -> RegistroGira:
    resumo = json.loads(row["resumo"])
    return RegistroGira(
        id=row["id"],
        data=datetime.fromisoformat(row["data"]),
        resumo=tuple(ResumoMedium(r["medium_nome"], int(r["atendidos"])) for r in resumo),
        total_atendidos=int(row["total"]),
    )
