"""
Testes das datas: emissão, vencimento e leituras.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import unittest

from core.models import DocumentText
from extractors import dates


def doc(text: str) -> DocumentText:
    return DocumentText.from_raw(text)


class TestEmissionDate(unittest.TestCase):

    def setUp(self):
        self.cascade = dates.emission_date_cascade()

    def test_rotulada(self):
        text = "Vencimento 09/10/2024\nData de emissão: 20/09/2024"
        self.assertEqual(self.cascade.run(doc(text)), "20/09/2024")

    def test_primeira_data_como_ultimo_recurso(self):
        value, source = self.cascade.run_with_source(doc("Pague ate 09/10/2024"))
        self.assertEqual(value, "09/10/2024")
        self.assertEqual(source, "first_date_anywhere")


class TestDueDate(unittest.TestCase):

    def setUp(self):
        self.cascade = dates.due_date_cascade()

    def test_cabecalho_tabular_tem_prioridade(self):
        text = (
            "Referente a   Vencimento   Valor a pagar\n"
            "SET/2024   09/10/2024   189,13\n"
            "Vencimento: 15/10/2024"
        )
        self.assertEqual(self.cascade.run(doc(text)), "09/10/2024")

    def test_rotulada(self):
        self.assertEqual(self.cascade.run(doc("Vencimento: 15/10/2024")), "15/10/2024")

    def test_data_invalida_passa_adiante(self):
        """Não há validação de calendário."""
        self.assertEqual(self.cascade.run(doc("Vencimento: 32/13/2024")), "32/13/2024")

    def test_ausente(self):
        self.assertEqual(self.cascade.run(doc("")), "")


class TestReadingDates(unittest.TestCase):

    def setUp(self):
        self.cascade = dates.reading_dates_cascade()

    def test_tres_datas_seguidas(self):
        self.assertEqual(
            self.cascade.run(doc("Leituras 12/08 11/09 10/10")),
            ("12/08", "11/09", "10/10"),
        )

    def test_nao_quebra_data_completa(self):
        self.assertIsNone(dates.reading_dates_consecutive(doc("Emissão 20/09/2024 21/10 22/11")))

    def test_rotuladas_parciais(self):
        text = "Leitura Anterior: 12/08\nLeitura Atual: 11/09"
        self.assertEqual(self.cascade.run(doc(text)), ("12/08", "11/09", ""))

    def test_ausentes(self):
        self.assertEqual(self.cascade.run(doc("")), ("", "", ""))


if __name__ == "__main__":
    unittest.main()
