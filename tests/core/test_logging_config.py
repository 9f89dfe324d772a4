"""Testes da configuracao de logging."""
import json
import logging
from unittest.mock import patch

import pytest

from clinica_followup.core.logging import ColoredFormatter, JSONFormatter, setup_logging


def _record(msg="Campanha concluida", level=logging.INFO):
    return logging.LogRecord(
        name="clinica_followup.services.followup.campanha",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestJSONFormatter:
    def test_campos_basicos(self):
        dados = json.loads(JSONFormatter().format(_record()))

        assert dados["level"] == "INFO"
        assert dados["logger"] == "clinica_followup.services.followup.campanha"
        assert dados["message"] == "Campanha concluida"
        assert "timestamp" in dados

    def test_extra_fields(self):
        record = _record()
        record.extra_fields = {"clinica_id": 1, "enviados": 3}

        dados = json.loads(JSONFormatter().format(record))

        assert dados["clinica_id"] == 1
        assert dados["enviados"] == 3

    def test_preserva_acentos(self):
        saida = JSONFormatter().format(_record("Sequência concluída"))
        assert "Sequência concluída" in saida


def test_colored_formatter_nao_altera_registo_original():
    record = _record(level=logging.WARNING)
    formatter = ColoredFormatter(fmt="%(levelname)s | %(message)s")

    saida = formatter.format(record)

    assert "\033[33m" in saida
    assert record.levelname == "WARNING"


@pytest.fixture
def root_logger_limpo():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    def test_producao_usa_json(self, root_logger_limpo):
        root = setup_logging(environment="production", log_level="warning")

        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert root.level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_ambiente_vem_de_settings(self, root_logger_limpo):
        with patch("clinica_followup.core.logging.settings") as mock_settings:
            mock_settings.is_production = True
            mock_settings.LOG_LEVEL = "INFO"
            root = setup_logging()

        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert root.level == logging.INFO

    def test_desenvolvimento_usa_cores(self, root_logger_limpo):
        root = setup_logging(environment="development", log_level="DEBUG")

        assert isinstance(root.handlers[0].formatter, ColoredFormatter)
        assert root.level == logging.DEBUG
