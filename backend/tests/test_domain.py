# -*- coding: utf-8 -*-
import pytest

from conftest import entidades, registrar
from gira.domain import (
    MANTER,
    CapacityError,
    ConflictError,
    DadosEntidade,
    DuplicateError,
    EstadoGira,
    NotFoundError,
    StatusConsulente,
    ValidationError,
    buscar_mediums,
    entidades_disponiveis,
    entidades_ordenadas,
    mediums_disponiveis,
    pode_atribuir,
)
from gira.domain.eventos import ConsulentesRemovidos, PresencaAlterada

GIRA = ("Exu", "Caboclos")


def _nomes(entidade):
    return [c.nome for c in entidade.consulentes]


def _atribuir(servico, estado, medium, entidade, nome, gira=GIRA):
    return servico.atribuir_consulente(estado, medium.id, entidade.id, nome, gira)


def test_cenario_limite_e_ausencia(servico):
    estado, p1 = registrar(servico)
    s1 = p1.entidades[0]

    estado = _atribuir(servico, estado, p1, s1, "A").estado
    estado = _atribuir(servico, estado, p1, s1, "B").estado
    assert _nomes(estado.localizar(p1.id, s1.id)[1]) == ["A", "B"]

    with pytest.raises(CapacityError):
        _atribuir(servico, estado, p1, s1, "C")
    assert _nomes(estado.localizar(p1.id, s1.id)[1]) == ["A", "B"]

    resultado = servico.alternar_presenca(estado, p1.id)
    estado = resultado.estado
    assert estado.localizar(p1.id, s1.id)[1].consulentes == ()
    assert isinstance(resultado.eventos[0], PresencaAlterada)
    removidos = [e for e in resultado.eventos if isinstance(e, ConsulentesRemovidos)]
    assert removidos[0].quantidade == 2
    assert removidos[0].entidade_nome is None

    estado = servico.alternar_presenca(estado, p1.id).estado
    estado = _atribuir(servico, estado, p1, s1, "D").estado
    assert _nomes(estado.localizar(p1.id, s1.id)[1]) == ["D"]


def test_limite_zero_nunca_recebe(servico):
    estado, p1 = registrar(servico, specs=(("Guardião", "Exu", 0),))
    s1 = p1.entidades[0]
    assert p1.presente and s1.disponivel
    assert not pode_atribuir(p1, s1, GIRA)
    with pytest.raises(CapacityError) as exc:
        _atribuir(servico, estado, p1, s1, "A")
    assert exc.value.detalhes["entidade_id"] == s1.id


def test_editar_removendo_entidade_com_consulente(servico):
    estado, p1 = registrar(servico, specs=(("S1", "Exu", 2), ("S2", "Caboclos", 2)))
    s1, s2 = p1.entidades
    estado = _atribuir(servico, estado, p1, s2, "A").estado
    consulente = estado.localizar(p1.id, s2.id)[1].consulentes[0]

    so_s1 = [DadosEntidade("S1", "Exu", 2, id=s1.id)]
    with pytest.raises(ConflictError):
        servico.editar_medium(estado, p1.id, entidades=so_s1)

    estado = servico.remover_consulente(estado, p1.id, s2.id, consulente.id).estado
    resultado = servico.editar_medium(estado, p1.id, entidades=so_s1)
    assert [e.id for e in resultado.valor.entidades] == [s1.id]
    assert resultado.eventos[0].entidades_removidas == (s2.id,)


def test_status_repetido_volta_para_agendado(servico):
    estado, p1 = registrar(servico)
    s1 = p1.entidades[0]
    resultado = _atribuir(servico, estado, p1, s1, "A")
    estado, consulente = resultado.estado, resultado.valor
    assert consulente.status == StatusConsulente.AGENDADO

    estado = servico.definir_status(estado, p1.id, s1.id, consulente.id, StatusConsulente.ATENDIDO).estado
    assert estado.localizar_consulente(p1.id, s1.id, consulente.id)[2].status == StatusConsulente.ATENDIDO

    estado = servico.definir_status(estado, p1.id, s1.id, consulente.id, "atendido").estado
    assert estado.localizar_consulente(p1.id, s1.id, consulente.id)[2].status == StatusConsulente.AGENDADO

    estado = servico.definir_status(estado, p1.id, s1.id, consulente.id, StatusConsulente.AUSENTE).estado
    estado = servico.definir_status(estado, p1.id, s1.id, consulente.id, StatusConsulente.ATENDIDO).estado
    assert estado.localizar_consulente(p1.id, s1.id, consulente.id)[2].status == StatusConsulente.ATENDIDO

    with pytest.raises(ValidationError):
        servico.definir_status(estado, p1.id, s1.id, consulente.id, "sumido")
    with pytest.raises(NotFoundError):
        servico.definir_status(estado, p1.id, s1.id, "nao-existe", StatusConsulente.ATENDIDO)


@pytest.mark.parametrize(
    "nome, specs, cargo",
    [
        ("", (("S1", "Exu", 1),), None),
        ("   ", (("S1", "Exu", 1),), None),
        ("P1", (), None),
        ("P1", (("", "Exu", 1),), None),
        ("P1", (("S1", "Exu", -1),), None),
        ("P1", (("S1", "Orixás", 1),), None),
        ("P1", (("S1", "Exu", 1),), "Presidente"),
    ],
)
def test_registro_invalido(servico, nome, specs, cargo):
    with pytest.raises(ValidationError):
        servico.registrar_medium(EstadoGira(), nome, entidades(*specs), cargo)


def test_registro_com_entidades_repetidas(servico):
    with pytest.raises(DuplicateError):
        servico.registrar_medium(EstadoGira(), "P1", entidades(("Tranca Rua", "Exu", 1), ("tranca rua ", "Exu", 2)))


def test_registro_cria_medium_presente(servico):
    estado, p1 = registrar(servico, nome="  Maria ", specs=(("S1", "Exu", 2), ("S2", "Caboclos", 3)), cargo="Ogã")
    assert p1.nome == "Maria"
    assert p1.presente
    assert p1.cargo == "Ogã"
    assert [e.ordem for e in p1.entidades] == [0, 1]
    assert all(e.disponivel and not e.consulentes for e in p1.entidades)
    assert estado.obter_medium(p1.id) is p1


def test_remover_medium(servico):
    estado, p1 = registrar(servico)
    estado = _atribuir(servico, estado, p1, p1.entidades[0], "A").estado
    resultado = servico.remover_medium(estado, p1.id)
    assert len(resultado.estado) == 0
    assert resultado.eventos[0].consulentes_removidos == 1
    with pytest.raises(NotFoundError):
        servico.remover_medium(resultado.estado, p1.id)


def test_indisponibilidade_limpa_e_nao_restaura(servico):
    estado, p1 = registrar(servico, specs=(("S1", "Exu", 3), ("S2", "Caboclos", 3)))
    s1, s2 = p1.entidades
    for nome in ("A", "B", "C"):
        estado = _atribuir(servico, estado, p1, s1, nome).estado
    estado = _atribuir(servico, estado, p1, s2, "D").estado

    resultado = servico.alternar_disponibilidade(estado, p1.id, s1.id)
    estado = resultado.estado
    assert estado.localizar(p1.id, s1.id)[1].consulentes == ()
    assert _nomes(estado.localizar(p1.id, s2.id)[1]) == ["D"]
    removidos = resultado.eventos[-1]
    assert isinstance(removidos, ConsulentesRemovidos)
    assert (removidos.quantidade, removidos.entidade_nome) == (3, "S1")

    with pytest.raises(CapacityError):
        _atribuir(servico, estado, p1, s1, "E")

    estado = servico.alternar_disponibilidade(estado, p1.id, s1.id).estado
    assert estado.localizar(p1.id, s1.id)[1].disponivel
    assert estado.localizar(p1.id, s1.id)[1].consulentes == ()


def test_atribuicao_bloqueada(servico):
    estado, p1 = registrar(servico, specs=(("S1", "Exu", 2), ("S2", "Marinheiros", 2)))
    s1, s2 = p1.entidades

    with pytest.raises(ValidationError):
        _atribuir(servico, estado, p1, s1, "  ")
    with pytest.raises(NotFoundError):
        servico.atribuir_consulente(estado, "nao-existe", s1.id, "A", GIRA)
    with pytest.raises(NotFoundError):
        servico.atribuir_consulente(estado, p1.id, "nao-existe", "A", GIRA)
    with pytest.raises(CapacityError):
        _atribuir(servico, estado, p1, s2, "A")
    with pytest.raises(CapacityError):
        _atribuir(servico, estado, p1, s1, "A", gira=())

    ausente = servico.alternar_presenca(estado, p1.id).estado
    with pytest.raises(CapacityError):
        _atribuir(servico, ausente, p1, s1, "A")


def test_mesmo_consulente_uma_vez_por_categoria(servico):
    estado, p1 = registrar(servico, specs=(("S1", "Exu", 2), ("S2", "Caboclos", 2)))
    estado, p2 = registrar(servico, estado, nome="P2", specs=(("T1", "Exu", 2),))
    estado = _atribuir(servico, estado, p1, p1.entidades[0], "Ana").estado

    with pytest.raises(DuplicateError):
        _atribuir(servico, estado, p2, p2.entidades[0], " ana ")

    estado = _atribuir(servico, estado, p1, p1.entidades[1], "Ana").estado
    assert _nomes(estado.localizar(p1.id, p1.entidades[1].id)[1]) == ["Ana"]


def test_renomear_respeita_nome_unico_por_categoria(servico):
    estado, p1 = registrar(servico, specs=(("S1", "Exu", 3), ("S2", "Caboclos", 3)))
    s1, s2 = p1.entidades
    estado = _atribuir(servico, estado, p1, s1, "Ana").estado
    resultado = _atribuir(servico, estado, p1, s1, "Bia")
    estado, bia = resultado.estado, resultado.valor

    with pytest.raises(DuplicateError):
        servico.renomear_consulente(estado, p1.id, s1.id, bia.id, "ana")
    assert _nomes(estado.localizar(p1.id, s1.id)[1]) == ["Ana", "Bia"]

    # mudar só a caixa do próprio nome não conflita com ele mesmo
    estado = servico.renomear_consulente(estado, p1.id, s1.id, bia.id, "BIA").estado
    # em outra categoria o nome está livre
    resultado = _atribuir(servico, estado, p1, s2, "Caio")
    estado = servico.renomear_consulente(estado, p1.id, s2.id, resultado.valor.id, "Ana").estado
    assert _nomes(estado.localizar(p1.id, s2.id)[1]) == ["Ana"]


def test_editar_categoria_respeita_nome_unico(servico):
    estado, p1 = registrar(servico, specs=(("S1", "Exu", 2),))
    estado, p2 = registrar(servico, estado, nome="P2", specs=(("T1", "Caboclos", 2), ("T2", "Caboclos", 2)))
    t1, t2 = p2.entidades
    estado = _atribuir(servico, estado, p1, p1.entidades[0], "Ana").estado
    estado = _atribuir(servico, estado, p2, t1, "ana").estado

    mover = [DadosEntidade("T1", "Exu", 2, id=t1.id), DadosEntidade("T2", "Caboclos", 2, id=t2.id)]
    with pytest.raises(DuplicateError):
        servico.editar_medium(estado, p2.id, entidades=mover)

    # a colisão vale também para a entidade que chega de outro médium
    estado = servico.remover_medium(estado, p1.id).estado
    estado = _atribuir(servico, estado, p2, t2, "Bia").estado
    estado, p3 = registrar(servico, estado, nome="P3", specs=(("U1", "Erês", 2),))
    estado = servico.atribuir_consulente(estado, p3.id, p3.entidades[0].id, "Bia", ("Erês",)).estado
    with pytest.raises(DuplicateError):
        servico.editar_medium(estado, p3.id, entidades=[DadosEntidade("U1", "Caboclos", 2, id=p3.entidades[0].id)])

    # sem colisão a mudança de categoria passa e leva os consulentes junto
    juntas = [DadosEntidade("T1", "Erês", 2, id=t1.id), DadosEntidade("T2", "Caboclos", 2, id=t2.id)]
    medium = servico.editar_medium(estado, p2.id, entidades=juntas).valor
    assert (medium.entidades[0].categoria, _nomes(medium.entidades[0])) == ("Erês", ["ana"])


def test_remover_e_renomear_consulente(servico):
    estado, p1 = registrar(servico)
    s1 = p1.entidades[0]
    resultado = _atribuir(servico, estado, p1, s1, "Ana")
    estado, ana = resultado.estado, resultado.valor

    with pytest.raises(ValidationError):
        servico.renomear_consulente(estado, p1.id, s1.id, ana.id, "")

    sem_mudanca = servico.renomear_consulente(estado, p1.id, s1.id, ana.id, "Ana ")
    assert sem_mudanca.estado is estado
    assert sem_mudanca.eventos == ()

    estado = servico.renomear_consulente(estado, p1.id, s1.id, ana.id, "Ana Paula").estado
    assert _nomes(estado.localizar(p1.id, s1.id)[1]) == ["Ana Paula"]

    with pytest.raises(NotFoundError):
        servico.remover_consulente(estado, p1.id, s1.id, "nao-existe")
    estado = servico.remover_consulente(estado, p1.id, s1.id, ana.id).estado
    assert estado.localizar(p1.id, s1.id)[1].consulentes == ()


def test_editar_medium(servico):
    estado, p1 = registrar(servico, specs=(("S1", "Exu", 2),), cargo="Ogã")
    s1 = p1.entidades[0]
    estado = _atribuir(servico, estado, p1, s1, "A").estado
    estado = _atribuir(servico, estado, p1, s1, "B").estado

    resultado = servico.editar_medium(estado, p1.id, nome="Pedro")
    assert resultado.valor.nome == "Pedro"
    assert resultado.valor.cargo == "Ogã"
    assert resultado.valor.entidades == estado.obter_medium(p1.id).entidades

    estado = servico.editar_medium(estado, p1.id, cargo=None).estado
    assert estado.obter_medium(p1.id).cargo is None
    assert servico.editar_medium(estado, p1.id, cargo=MANTER).valor.cargo is None

    with pytest.raises(ConflictError):
        servico.editar_medium(estado, p1.id, entidades=[DadosEntidade("S1", "Exu", 1, id=s1.id)])
    with pytest.raises(NotFoundError):
        servico.editar_medium(estado, p1.id, entidades=[DadosEntidade("S1", "Exu", 2, id="nao-existe")])
    with pytest.raises(ValidationError):
        servico.editar_medium(estado, p1.id, entidades=[])
    with pytest.raises(ValidationError):
        servico.editar_medium(estado, p1.id, nome=" ")
    with pytest.raises(NotFoundError):
        servico.editar_medium(estado, "nao-existe", nome="X")

    novas = [DadosEntidade("Caboclo", "Caboclos", 1), DadosEntidade("S1 renomeada", "Exu", 4, id=s1.id)]
    medium = servico.editar_medium(estado, p1.id, entidades=novas).valor
    caboclo, s1_nova = medium.entidades
    assert caboclo.ordem == 0 and caboclo.id != s1.id
    assert s1_nova.id == s1.id
    assert (s1_nova.nome, s1_nova.limite, s1_nova.ordem) == ("S1 renomeada", 4, 1)
    assert _nomes(s1_nova) == ["A", "B"]


def test_atualizar_limites(servico):
    estado, comum = registrar(servico, nome="Comum", specs=(("S1", "Exu", 2), ("Zero", "Exu", 0)))
    estado, dirigente = registrar(servico, estado, nome="Dirigente", specs=(("T1", "Exu", 2),), cargo="Dirigente")

    resultado = servico.atualizar_limites(estado, 5)
    assert resultado.valor == 1
    atualizado = resultado.estado.obter_medium(comum.id)
    assert [e.limite for e in atualizado.entidades] == [5, 0]
    assert resultado.estado.obter_medium(dirigente.id).entidades[0].limite == 2

    with pytest.raises(ValidationError):
        servico.atualizar_limites(estado, -1)

    s1 = comum.entidades[0]
    estado = _atribuir(servico, estado, comum, s1, "A").estado
    estado = _atribuir(servico, estado, comum, s1, "B").estado
    with pytest.raises(ConflictError):
        servico.atualizar_limites(estado, 1)


def test_estado_anterior_nao_muda(servico):
    estado, p1 = registrar(servico)
    s1 = p1.entidades[0]
    antes = _atribuir(servico, estado, p1, s1, "A").estado
    depois = servico.alternar_presenca(antes, p1.id).estado
    assert _nomes(antes.localizar(p1.id, s1.id)[1]) == ["A"]
    assert depois.localizar(p1.id, s1.id)[1].consulentes == ()
    assert antes.obter_medium(p1.id).presente


def test_ordem_das_entidades(servico, taxonomia):
    _, p1 = registrar(
        servico,
        specs=(("Caboclo B", "Caboclos", 1), ("Exu A", "Exu", 1), ("Caboclo A", "Caboclos", 1), ("Erê", "Erês", 1)),
    )
    assert [e.nome for e in entidades_ordenadas(p1, taxonomia)] == ["Exu A", "Caboclo B", "Caboclo A", "Erê"]


def test_mediums_disponiveis_por_cargo(servico, taxonomia):
    estado, sem_cargo = registrar(servico, nome="Sem cargo")
    estado, oga = registrar(servico, estado, nome="Ogã", cargo="Ogã")
    estado, lotado = registrar(servico, estado, nome="Lotado", specs=(("S1", "Exu", 0),))
    estado, dirigente = registrar(servico, estado, nome="Dirigente", cargo="Dirigente")
    estado, outro = registrar(servico, estado, nome="Outro")

    nomes = [m.nome for m in mediums_disponiveis(estado, GIRA, taxonomia)]
    assert nomes == ["Dirigente", "Ogã", "Sem cargo", "Outro"]
    assert mediums_disponiveis(estado, ("Erês",), taxonomia) == []


def test_entidades_disponiveis(servico, taxonomia):
    estado, p1 = registrar(servico, specs=(("S1", "Caboclos", 1), ("S2", "Exu", 1), ("S3", "Erês", 1)))
    s1, s2, _ = p1.entidades
    assert [e.nome for e in entidades_disponiveis(estado, p1.id, GIRA, taxonomia)] == ["S2", "S1"]

    estado = _atribuir(servico, estado, p1, s2, "A").estado
    assert [e.nome for e in entidades_disponiveis(estado, p1.id, GIRA, taxonomia)] == ["S1"]
    with pytest.raises(NotFoundError):
        entidades_disponiveis(estado, "nao-existe", GIRA, taxonomia)


def test_busca(servico, taxonomia):
    estado, maria = registrar(servico, nome="Maria", specs=(("Tranca Rua", "Exu", 2), ("Pena Branca", "Caboclos", 2)))
    estado, joao = registrar(servico, estado, nome="João", specs=(("Zé Pilintra", "Malandros", 2), ("Sete Flechas", "Caboclos", 2)))
    estado = _atribuir(servico, estado, joao, joao.entidades[1], "Carla").estado

    visoes = buscar_mediums(estado, "", GIRA, taxonomia)
    assert [v.medium.nome for v in visoes] == ["João", "Maria"]
    assert [e.nome for e in visoes[0].entidades] == ["Sete Flechas"]

    visoes = buscar_mediums(estado, "MARIA", GIRA, taxonomia)
    assert [e.nome for e in visoes[0].entidades] == ["Tranca Rua", "Pena Branca"]

    visoes = buscar_mediums(estado, "carla", GIRA, taxonomia)
    assert [(v.medium.nome, [e.nome for e in v.entidades]) for v in visoes] == [("João", ["Sete Flechas"])]

    visoes = buscar_mediums(estado, "caboclos", GIRA, taxonomia)
    assert {v.medium.nome for v in visoes} == {"Maria", "João"}

    # entidades fora da gira não entram na busca
    assert buscar_mediums(estado, "pilintra", GIRA, taxonomia) == []
