"""
Testes do motor de reparo (inferência entre campos e cobertura total).
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import math
import unittest

from config.entity_fixups import EntityFixup
from core.models import DocumentText, ExtractedBillRecord
from extractors.repair import DataRepairEngine


def repair(record, text, **kwargs):
    kwargs.setdefault("fixups", [])
    engine = DataRepairEngine(**kwargs)
    return engine.repair(record, DocumentText.from_raw(text))


class TestRepairInference(unittest.TestCase):

    def test_total_e_o_maior_valor_monetario(self):
        record = repair(ExtractedBillRecord(), "Tarifa R$ 45,00\nTotal geral R$ 189,13")
        self.assertEqual(record.total_value, 189.13)

    def test_estimativas_a_partir_do_total(self):
        record = repair(ExtractedBillRecord(), "Tarifa R$ 45,00\nTotal geral R$ 189,13")
        self.assertEqual(record.energy_electric_kwh, 126.0)
        self.assertAlmostEqual(record.energy_electric_value, 132.39)
        self.assertAlmostEqual(record.public_lighting_value, 18.91)

    def test_estimativas_configuraveis(self):
        record = repair(
            ExtractedBillRecord(total_value=100.0),
            "",
            kwh_price_estimate=2.0,
            electric_value_share=0.5,
            public_lighting_share=0.2,
        )
        self.assertEqual(record.energy_electric_kwh, 50.0)
        self.assertEqual(record.energy_electric_value, 50.0)
        self.assertEqual(record.public_lighting_value, 20.0)

    def test_valores_extraidos_nao_sao_substituidos(self):
        record = ExtractedBillRecord(total_value=215.05, energy_electric_kwh=150.75, public_lighting_value=10.75)
        repair(record, "R$ 999,99")
        self.assertEqual(record.total_value, 215.05)
        self.assertEqual(record.energy_electric_kwh, 150.75)
        self.assertEqual(record.public_lighting_value, 10.75)

    def test_valor_eletrico_extraido_e_mantido_na_estimativa(self):
        record = repair(ExtractedBillRecord(total_value=100.0, energy_electric_value=42.0), "")
        self.assertEqual(record.energy_electric_kwh, 67.0)
        self.assertEqual(record.energy_electric_value, 42.0)

    def test_sem_estimativa_quando_kwh_foi_extraido(self):
        record = repair(ExtractedBillRecord(total_value=100.0, energy_electric_kwh=120.0), "")
        self.assertEqual(record.energy_electric_kwh, 120.0)
        self.assertEqual(record.energy_electric_value, 0.0)

    def test_cliente_copiado_da_instalacao(self):
        record = repair(ExtractedBillRecord(installation_number="3001422762"), "")
        self.assertEqual(record.client_number, "3001422762")

    def test_consumo_do_historico(self):
        record = ExtractedBillRecord(reference_month="Setembro", reference_year=2024)
        repair(record, "AGO/24  1.850  61,67  30\nSET/24  1.960  67,58  29")
        self.assertEqual(record.energy_electric_kwh, 1960.0)

    def test_kwh_de_qualquer_token(self):
        record = repair(ExtractedBillRecord(), "Consumo 320 kWh no periodo")
        self.assertEqual(record.energy_electric_kwh, 320.0)

    def test_nome_de_linha_maiuscula(self):
        record = repair(ExtractedBillRecord(), "JOAO DA SILVA SAURO\nRua X 10")
        self.assertEqual(record.client_name, "JOAO DA SILVA SAURO")

    def test_vencimento_da_primeira_data(self):
        record = repair(ExtractedBillRecord(), "emitida 20/09/2024 e paga 09/10/2024")
        self.assertEqual(record.due_date, "20/09/2024")


class TestEntityFixups(unittest.TestCase):

    def test_so_preenche_campos_vazios(self):
        fixups = [EntityFixup("ACME", "client_name", "ACME LTDA")]
        record = repair(ExtractedBillRecord(client_name="OUTRO"), "ACME", fixups=fixups)
        self.assertEqual(record.client_name, "OUTRO")

        record = repair(ExtractedBillRecord(), "ACME", fixups=fixups)
        self.assertEqual(record.client_name, "ACME LTDA")

    def test_overwrite(self):
        fixups = [EntityFixup("ACME", "client_name", "ACME LTDA", overwrite=True)]
        record = repair(ExtractedBillRecord(client_name="OUTRO"), "ACME", fixups=fixups)
        self.assertEqual(record.client_name, "ACME LTDA")

    def test_fingerprint_ausente(self):
        fixups = [EntityFixup("ACME", "client_name", "ACME LTDA")]
        record = repair(ExtractedBillRecord(), "outra empresa", fixups=fixups)
        self.assertEqual(record.client_name, "")

    def test_campo_desconhecido_e_ignorado(self):
        fixups = [EntityFixup("ACME", "campo_inexistente", "x")]
        with self.assertLogs("extractors.repair", level="WARNING"):
            record = repair(ExtractedBillRecord(), "ACME", fixups=fixups)
        self.assertFalse(hasattr(record, "campo_inexistente"))

    def test_tabela_padrao(self):
        engine = DataRepairEngine()
        record = engine.repair(ExtractedBillRecord(), DocumentText.from_raw("SELFWAY\nreferente SET/2024"))
        self.assertEqual(record.client_name, "SELFWAY TREINAMENTO PERSONALIZADO LTDA")
        self.assertEqual(record.client_number, "7202210726")
        self.assertEqual(record.installation_number, "3001422762")
        self.assertEqual(record.reference_month, "Setembro")
        self.assertEqual(record.reference_year, 2024)


class TestCoverage(unittest.TestCase):
    """Nenhum campo termina NaN e o mês é canônico ou vazio."""

    def test_nan_vira_zero(self):
        record = ExtractedBillRecord(total_value=float("nan"), energy_sceee_value=float("inf"))
        repair(record, "")
        for name in ExtractedBillRecord.numeric_fields():
            value = getattr(record, name)
            self.assertIsInstance(value, float)
            self.assertFalse(math.isnan(value) or math.isinf(value), name)

    def test_sinais_dos_valores(self):
        """Só o crédito compensado fica negativo."""
        record = ExtractedBillRecord(
            energy_electric_value=-5.0,
            total_value=-3.0,
            energy_compensated_value=76.19,
        )
        repair(record, "")
        self.assertEqual(record.energy_electric_value, 5.0)
        self.assertEqual(record.total_value, 3.0)
        self.assertEqual(record.energy_compensated_value, -76.19)

    def test_credito_zero_nao_vira_menos_zero(self):
        record = repair(ExtractedBillRecord(energy_compensated_value=-0.0), "")
        self.assertEqual(str(record.energy_compensated_value), "0.0")

    def test_mes_normalizado_ou_vazio(self):
        self.assertEqual(repair(ExtractedBillRecord(reference_month="SET"), "").reference_month, "Setembro")
        self.assertEqual(repair(ExtractedBillRecord(reference_month="Foo"), "").reference_month, "")

    def test_strings_e_ano(self):
        record = ExtractedBillRecord(client_name=None, reference_year="abc")
        repair(record, "")
        self.assertEqual(record.client_name, "")
        self.assertEqual(record.reference_year, 0)


if __name__ == "__main__":
    unittest.main()
