"""
Testes para funções utilitárias de extração.

Foco principal: parsing de números brasileiros e normalização de meses.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import math
import unittest

from extractors.utils import (
    find_money_values,
    find_number_tokens,
    is_canonical_month,
    month_name,
    month_number,
    normalize_month,
    parse_br_number,
    safe_number,
    split_lines,
    strip_accents,
)


class TestParseBrNumber(unittest.TestCase):
    """Testes para parse_br_number - formato 1.234,56."""

    def test_milhar_e_decimal(self):
        self.assertEqual(parse_br_number("1.234,56"), 1234.56)

    def test_so_decimal(self):
        self.assertEqual(parse_br_number("150,75"), 150.75)

    def test_milhar_sem_decimal(self):
        """'1.960' no histórico de consumo é mil novecentos e sessenta."""
        self.assertEqual(parse_br_number("1.960"), 1960.0)

    def test_ponto_decimal(self):
        self.assertEqual(parse_br_number("67.58"), 67.58)

    def test_com_prefixo_e_sufixo(self):
        self.assertEqual(parse_br_number("R$ 189,13"), 189.13)
        self.assertEqual(parse_br_number("150,75 kWh"), 150.75)

    def test_negativo(self):
        self.assertEqual(parse_br_number("-45,20"), -45.2)

    def test_malformado_retorna_default(self):
        self.assertEqual(parse_br_number("abc"), 0.0)
        self.assertEqual(parse_br_number(""), 0.0)
        self.assertEqual(parse_br_number(None), 0.0)
        self.assertEqual(parse_br_number(",,."), 0.0)
        self.assertIsNone(parse_br_number("abc", default=None))

    def test_nunca_retorna_nan(self):
        for value in ("nan", "inf", "1e999", "-", "R$"):
            result = parse_br_number(value)
            self.assertFalse(math.isnan(result))
            self.assertFalse(math.isinf(result))


class TestTokens(unittest.TestCase):

    def test_find_number_tokens(self):
        self.assertEqual(
            find_number_tokens("Energia Elétrica kWh 100 0,95238095 95,23"),
            ["100", "0,95238095", "95,23"],
        )
        self.assertEqual(find_number_tokens(""), [])

    def test_find_money_values(self):
        self.assertEqual(find_money_values("Tarifa R$ 45,00 ... Total R$ 189,13"), [45.0, 189.13])
        self.assertEqual(find_money_values("sem valores"), [])

    def test_safe_number(self):
        self.assertEqual(safe_number(float("nan")), 0.0)
        self.assertEqual(safe_number(None), 0.0)
        self.assertEqual(safe_number("x"), 0.0)
        self.assertEqual(safe_number(12.5), 12.5)


class TestMonths(unittest.TestCase):
    """Testes para normalize_month e auxiliares."""

    def test_abreviaturas(self):
        self.assertEqual(normalize_month("SET"), "Setembro")
        self.assertEqual(normalize_month("jan"), "Janeiro")
        self.assertEqual(normalize_month("Dez."), "Dezembro")

    def test_nome_completo_sem_acento(self):
        self.assertEqual(normalize_month("marco"), "Março")
        self.assertEqual(normalize_month("MARÇO"), "Março")
        self.assertEqual(normalize_month("abril"), "Abril")

    def test_desconhecido_volta_capitalizado(self):
        self.assertEqual(normalize_month("january"), "January")
        self.assertFalse(is_canonical_month(normalize_month("january")))

    def test_vazio(self):
        self.assertEqual(normalize_month(""), "")
        self.assertEqual(normalize_month(None), "")

    def test_numero_nome(self):
        self.assertEqual(month_name(9), "Setembro")
        self.assertEqual(month_name(13), "")
        self.assertEqual(month_number("Março"), 3)
        self.assertEqual(month_number("Marco"), 0)


class TestTextHelpers(unittest.TestCase):

    def test_split_lines(self):
        self.assertEqual(split_lines("  A \n\n   \nB\r\n"), ["A", "B"])
        self.assertEqual(split_lines(None), [])

    def test_strip_accents(self):
        self.assertEqual(strip_accents("Instalação Elétrica"), "Instalacao Eletrica")


if __name__ == "__main__":
    unittest.main()
