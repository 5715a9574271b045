"""
Testes da cascata de mês/ano de referência (relógio injetado).
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from datetime import datetime

import pytest

from core.models import DocumentText
from extractors.reference import is_tabular_header, reference_cascade


def fixed_clock():
    return datetime(2023, 3, 15)


@pytest.fixture
def cascade():
    return reference_cascade(fixed_clock)


def run(cascade, text):
    return cascade.run_with_source(DocumentText.from_raw(text))


class TestReferenceCascade:

    def test_cabecalho_tabular(self, cascade):
        text = "Referente a   Vencimento   Valor a pagar\nSET/2024   09/10/2024   189,13"
        assert run(cascade, text) == (("Setembro", 2024), "reference_from_tabular_header")

    def test_frase_referente(self, cascade):
        assert run(cascade, "Referente a Janeiro/2024")[0] == ("Janeiro", 2024)

    def test_frase_referente_sem_acento(self, cascade):
        assert run(cascade, "Referente a MARCO/2024")[0] == ("Março", 2024)

    def test_mes_por_extenso(self, cascade):
        value, source = run(cascade, "Conta de setembro de 2024")
        assert value == ("Setembro", 2024)
        assert source == "reference_from_month_name"

    def test_abreviatura_solta(self, cascade):
        value, source = run(cascade, "Historico OUT 2023 consumo")
        assert value == ("Outubro", 2023)
        assert source == "reference_from_abbreviation"

    def test_relogio_como_ultimo_recurso(self, cascade):
        assert run(cascade, "") == (("Março", 2023), "reference_from_clock")

    def test_mes_nao_canonico_e_rejeitado(self, cascade):
        value, source = run(cascade, "Referente a Foo/2024")
        assert source == "reference_from_clock"
        assert value == ("Março", 2023)


def test_is_tabular_header():
    assert is_tabular_header("Referente a   Vencimento   Valor a pagar")
    assert not is_tabular_header("Referente a Janeiro/2024")
