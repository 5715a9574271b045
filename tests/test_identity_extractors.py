"""
Testes das cascatas de identificação: cliente, instalação e titular.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import unittest

from core.cascade import FieldCascade
from core.models import DocumentText
from extractors import identity


def doc(text: str) -> DocumentText:
    return DocumentText.from_raw(text)


class TestFieldCascade(unittest.TestCase):
    """Testes para a execução em ordem da cascata."""

    def test_primeira_estrategia_vence(self):
        def first(document):
            return "A"

        def second(document):
            return "B"

        cascade = FieldCascade("campo", [first, second])
        self.assertEqual(cascade.run_with_source(doc("x")), ("A", "first"))

    def test_pula_estrategias_vazias(self):
        cascade = FieldCascade("campo", [lambda d: None, lambda d: "", lambda d: "C"])
        self.assertEqual(cascade.run(doc("x")), "C")

    def test_default_quando_esgota(self):
        cascade = FieldCascade("campo", [lambda d: None], default=0.0)
        self.assertEqual(cascade.run_with_source(doc("x")), (0.0, None))
        self.assertEqual(len(cascade), 1)


class TestClientNumber(unittest.TestCase):

    def setUp(self):
        self.cascade = identity.client_number_cascade()

    def test_rotulo_vence_numero_solto(self):
        """Número ancorado no rótulo tem prioridade sobre dígitos soltos."""
        text = "Protocolo 87654321\nNº DO CLIENTE\n3001116735\nOutro texto"
        value, source = self.cascade.run_with_source(doc(text))
        self.assertEqual(value, "3001116735")
        self.assertEqual(source, "client_number_after_label")

    def test_mesma_linha(self):
        self.assertEqual(self.cascade.run(doc("Nº DO CLIENTE: 7202210726\nfim")), "7202210726")

    def test_frase(self):
        self.assertEqual(self.cascade.run(doc("Código do cliente 445566")), "445566")

    def test_digitos_no_topo(self):
        value, source = self.cascade.run_with_source(doc("CONTA MENSAL\n12345678\n"))
        self.assertEqual(value, "12345678")
        self.assertEqual(source, "client_number_top_digits")

    def test_sem_numero(self):
        self.assertEqual(self.cascade.run(doc("")), "")


class TestInstallationNumber(unittest.TestCase):

    def setUp(self):
        self.cascade = identity.installation_number_cascade()

    def test_rotulo(self):
        text = "Nº DA INSTALAÇÃO\n3001422762"
        self.assertEqual(self.cascade.run(doc(text)), "3001422762")

    def test_frase_sem_acento(self):
        self.assertEqual(self.cascade.run(doc("Instalacao: 3001422762")), "3001422762")

    def test_prefixo_conhecido(self):
        value, source = self.cascade.run_with_source(doc("FATURA\nCODIGO 7204123456\n"))
        self.assertEqual(value, "7204123456")
        self.assertEqual(source, "installation_number_known_prefix")

    def test_prefixos_configuraveis(self):
        cascade = identity.installation_number_cascade(prefixes=["9999"])
        self.assertEqual(cascade.run(doc("CODIGO 7204123456")), "")
        self.assertEqual(cascade.run(doc("CODIGO 9999123456")), "9999123456")


class TestClientName(unittest.TestCase):

    def setUp(self):
        self.cascade = identity.client_name_cascade()

    def test_rotulado(self):
        text = "CLIENTE: JOAO DA SILVA\nRua das Flores, 100"
        self.assertEqual(self.cascade.run(doc(text)), "JOAO DA SILVA")

    def test_linha_maiuscula_no_cabecalho(self):
        text = "CEMIG DISTRIBUICAO S.A.\nMARIA APARECIDA SOUZA\nRua das Flores 100"
        value, source = self.cascade.run_with_source(doc(text))
        self.assertEqual(value, "MARIA APARECIDA SOUZA")
        self.assertEqual(source, "client_name_header_line")

    def test_nome_proprio(self):
        text = "Maria Aparecida Souza\nRua das Flores 100"
        self.assertEqual(self.cascade.run(doc(text)), "Maria Aparecida Souza")

    def test_antes_do_endereco(self):
        text = "maria souza lima\nRua das Flores 100"
        self.assertEqual(identity.client_name_before_address(doc(text)), "maria souza lima")

    def test_antes_do_cpf(self):
        text = "empresa exemplo ltda\nCNPJ 12.345.678/0001-90"
        self.assertEqual(identity.client_name_before_tax_id(doc(text)), "empresa exemplo ltda")

    def test_sem_nome(self):
        self.assertEqual(self.cascade.run(doc("123\n456")), "")


if __name__ == "__main__":
    unittest.main()
