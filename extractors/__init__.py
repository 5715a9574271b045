"""
Extratores de dados de faturas de energia.

- ``energy_bill``: extrator especializado (rótulos da distribuidora, pt-BR)
- ``generic``: extrator genérico usado como fallback
- ``identity``, ``reference``, ``financial``, ``dates``: cascatas por campo
- ``repair``: motor de reparo entre campos
- ``utils``: normalização de texto e parsers de valores
"""
