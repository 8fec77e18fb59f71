"""Verificação e reparo do estado.

``validar_invariantes`` falha no primeiro problema e roda depois de cada
mutação. ``reparar_estado`` é usado na carga: descarta ou corrige registros
inválidos e devolve a lista do que foi encontrado.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, List, Optional, Set, Tuple

from ..entities import Consulente, Entidade, EstadoGira, Medium, RegistroGira
from ..entities.medium import agora_utc
from ..enums import StatusConsulente
from ..exceptions import DataIntegrityError
from ..taxonomia import Taxonomia


def validar_invariantes(estado: EstadoGira) -> None:
    ids: Set[str] = set()

    def _registrar_id(valor: str) -> None:
        if valor in ids:
            raise DataIntegrityError("id_unico", f"Identificador {valor!r} aparece mais de uma vez.", valor)
        ids.add(valor)

    for medium in estado:
        _registrar_id(medium.id)
        if not medium.nome.strip():
            raise DataIntegrityError("nome_vazio", "Médium sem nome.", medium.id)
        for e in medium.entidades:
            _registrar_id(e.id)
            if not e.nome.strip():
                raise DataIntegrityError("nome_vazio", "Entidade sem nome.", e.id)
            if e.limite < 0:
                raise DataIntegrityError("limite_negativo", f"Entidade {e.nome} com limite negativo.", e.id)
            if e.consulentes and not medium.presente:
                raise DataIntegrityError(
                    "ausente_com_consulentes", f"Médium ausente {medium.nome} com consulentes.", medium.id
                )
            if e.consulentes and not e.disponivel:
                raise DataIntegrityError(
                    "indisponivel_com_consulentes", f"Entidade indisponível {e.nome} com consulentes.", e.id
                )
            if e.disponivel and e.ocupacao > e.limite:
                raise DataIntegrityError(
                    "limite_excedido",
                    f"Entidade {e.nome} com {e.ocupacao} consulentes e limite {e.limite}.",
                    e.id,
                )
            for c in e.consulentes:
                _registrar_id(c.id)
                if not c.nome.strip():
                    raise DataIntegrityError("nome_vazio", "Consulente sem nome.", c.id)


def validar_registro(registro: RegistroGira) -> None:
    soma = sum(r.atendidos for r in registro.resumo)
    if soma != registro.total_atendidos:
        raise DataIntegrityError(
            "total_atendidos",
            f"Total {registro.total_atendidos} difere da soma {soma} do resumo.",
            registro.id,
        )
    if any(r.atendidos < 0 for r in registro.resumo):
        raise DataIntegrityError("atendidos_negativo", "Resumo com contagem negativa.", registro.id)


def reparar_estado(dados: Any, taxonomia: Taxonomia) -> Tuple[EstadoGira, List[DataIntegrityError]]:
    """Reconstrói o estado a partir de dados persistidos sem confiar neles."""
    if dados is None:
        return EstadoGira(), []
    problemas: List[DataIntegrityError] = []
    if not isinstance(dados, dict) or not isinstance(dados.get("mediums"), list):
        problemas.append(DataIntegrityError("formato", "Estado salvo em formato desconhecido."))
        return EstadoGira(), problemas

    ids: Set[str] = set()
    mediums: List[Medium] = []
    for bruto in dados["mediums"]:
        medium = _reparar_medium(bruto, taxonomia, ids, problemas)
        if medium is not None:
            mediums.append(medium)
    return EstadoGira(tuple(mediums)), problemas


def _id_livre(bruto: dict, ids: Set[str]) -> Optional[str]:
    # o id só é reservado em 'ids' depois que o registro é aceito
    valor = bruto.get("id")
    if not isinstance(valor, str) or not valor.strip() or valor in ids:
        return None
    return valor


def _nome_valido(bruto: dict) -> Optional[str]:
    nome = bruto.get("nome")
    if not isinstance(nome, str) or not nome.strip():
        return None
    return nome.strip()


def _reparar_medium(
    bruto: Any, taxonomia: Taxonomia, ids: Set[str], problemas: List[DataIntegrityError]
) -> Optional[Medium]:
    if not isinstance(bruto, dict):
        problemas.append(DataIntegrityError("formato", "Médium salvo em formato desconhecido."))
        return None
    medium_id = _id_livre(bruto, ids)
    nome = _nome_valido(bruto)
    if medium_id is None or nome is None:
        problemas.append(
            DataIntegrityError("medium_invalido", "Médium sem id único ou sem nome descartado.", bruto.get("id"))
        )
        return None
    ids.add(medium_id)

    presente = bruto.get("presente", True)
    if not isinstance(presente, bool):
        problemas.append(DataIntegrityError("presenca_invalida", f"Presença inválida em {nome}.", medium_id))
        presente = True

    cargo = bruto.get("cargo")
    if cargo is not None and cargo not in taxonomia.cargos:
        problemas.append(DataIntegrityError("cargo_desconhecido", f"Cargo {cargo!r} removido de {nome}.", medium_id))
        cargo = None

    criado_em = _data(bruto.get("criado_em"))
    if criado_em is None:
        problemas.append(DataIntegrityError("data_invalida", f"Data de cadastro inválida em {nome}.", medium_id))
        criado_em = agora_utc()

    entidades: List[Entidade] = []
    brutas = bruto.get("entidades")
    if not isinstance(brutas, list):
        problemas.append(DataIntegrityError("formato", f"Entidades de {nome} em formato desconhecido.", medium_id))
        brutas = []
    for i, b in enumerate(brutas):
        entidade = _reparar_entidade(b, i, presente, taxonomia, ids, problemas)
        if entidade is not None:
            entidades.append(entidade)

    return Medium(
        id=medium_id,
        nome=nome,
        entidades=tuple(entidades),
        presente=presente,
        cargo=cargo,
        criado_em=criado_em,
    )


def _reparar_entidade(
    bruto: Any,
    posicao: int,
    medium_presente: bool,
    taxonomia: Taxonomia,
    ids: Set[str],
    problemas: List[DataIntegrityError],
) -> Optional[Entidade]:
    if not isinstance(bruto, dict):
        problemas.append(DataIntegrityError("formato", "Entidade salva em formato desconhecido."))
        return None
    entidade_id = _id_livre(bruto, ids)
    nome = _nome_valido(bruto)
    limite = bruto.get("limite")
    categoria = bruto.get("categoria")
    if entidade_id is None or nome is None:
        problemas.append(
            DataIntegrityError("entidade_invalida", "Entidade sem id único ou sem nome descartada.", bruto.get("id"))
        )
        return None
    if isinstance(limite, bool) or not isinstance(limite, int) or limite < 0:
        problemas.append(DataIntegrityError("limite_invalido", f"Entidade {nome} com limite inválido.", entidade_id))
        return None
    if categoria not in taxonomia.categorias:
        problemas.append(
            DataIntegrityError("categoria_desconhecida", f"Entidade {nome} com categoria {categoria!r}.", entidade_id)
        )
        return None
    ids.add(entidade_id)

    ordem = bruto.get("ordem", posicao)
    if isinstance(ordem, bool) or not isinstance(ordem, int):
        ordem = posicao
    disponivel = bruto.get("disponivel", True)
    if not isinstance(disponivel, bool):
        problemas.append(DataIntegrityError("disponibilidade_invalida", f"Disponibilidade inválida em {nome}.", entidade_id))
        disponivel = True

    consulentes: List[Consulente] = []
    brutos = bruto.get("consulentes")
    if not isinstance(brutos, list):
        brutos = []
    for b in brutos:
        consulente = _reparar_consulente(b, ids, problemas)
        if consulente is not None:
            consulentes.append(consulente)

    if consulentes and not (medium_presente and disponivel):
        problemas.append(
            DataIntegrityError(
                "consulentes_sem_atendimento",
                f"{len(consulentes)} consulente(s) de {nome} removidos: médium ausente ou entidade indisponível.",
                entidade_id,
            )
        )
        consulentes = []
    if len(consulentes) > limite:
        problemas.append(
            DataIntegrityError(
                "limite_excedido",
                f"{len(consulentes) - limite} consulente(s) acima do limite de {nome} removidos.",
                entidade_id,
            )
        )
        consulentes = consulentes[:limite]

    return Entidade(
        id=entidade_id,
        nome=nome,
        categoria=categoria,
        limite=limite,
        ordem=ordem,
        disponivel=disponivel,
        consulentes=tuple(consulentes),
    )


def _reparar_consulente(bruto: Any, ids: Set[str], problemas: List[DataIntegrityError]) -> Optional[Consulente]:
    if not isinstance(bruto, dict):
        problemas.append(DataIntegrityError("formato", "Consulente salvo em formato desconhecido."))
        return None
    consulente_id = _id_livre(bruto, ids)
    nome = _nome_valido(bruto)
    if consulente_id is None or nome is None:
        problemas.append(
            DataIntegrityError("consulente_invalido", "Consulente sem id único ou sem nome descartado.", bruto.get("id"))
        )
        return None
    ids.add(consulente_id)
    try:
        status = StatusConsulente(bruto.get("status", StatusConsulente.AGENDADO.value))
    except ValueError:
        problemas.append(DataIntegrityError("status_invalido", f"Status de {nome} reiniciado.", consulente_id))
        status = StatusConsulente.AGENDADO
    return Consulente(id=consulente_id, nome=nome, status=status)


def _data(valor: Any) -> Optional[datetime]:
    if not isinstance(valor, str):
        return None
    try:
        data = datetime.fromisoformat(valor)
    except ValueError:
        return None
    if data.tzinfo is None:
        data = data.replace(tzinfo=timezone.utc)
    return data
