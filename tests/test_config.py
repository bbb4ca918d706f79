import pytest
from pydantic import ValidationError

from tgbot_kit.config import load_config


def test_load_with_env_interpolation(tmp_path, monkeypatch):
    monkeypatch.delenv("TGBOT_KIT_TEST_TOKEN", raising=False)
    (tmp_path / ".env").write_text("TGBOT_KIT_TEST_TOKEN=123:abc\n")
    (tmp_path / "config.yaml").write_text(
        "log_level: DEBUG\n"
        "bot:\n"
        "  token: ${TGBOT_KIT_TEST_TOKEN}\n"
        "  api_endpoint: http://localhost:8081/bot\n"
        "storage:\n"
        "  db_path: /tmp/x.db\n"
    )

    config = load_config(tmp_path / "config.yaml", tmp_path / ".env")

    assert config.log_level == "DEBUG"
    assert config.bot.token == "123:abc"
    assert config.bot.api_endpoint == "http://localhost:8081/bot"
    assert config.bot.poll_timeout == 60
    assert config.storage.db_path == "/tmp/x.db"


def test_defaults(tmp_path):
    (tmp_path / "config.yaml").write_text("bot:\n  token: '1:x'\n")

    config = load_config(tmp_path / "config.yaml", tmp_path / "missing.env")

    assert config.bot.api_endpoint is None
    assert config.bot.drop_pending_updates is False
    assert config.storage.db_path.endswith("tgbot_kit.db")


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_blank_token_rejected(tmp_path):
    (tmp_path / "config.yaml").write_text("bot:\n  token: '  '\n")

    with pytest.raises(ValidationError):
        load_config(tmp_path / "config.yaml", tmp_path / "missing.env")


def test_cli_config_check(tmp_path, capsys):
    from tgbot_kit.__main__ import main

    (tmp_path / "config.yaml").write_text("bot:\n  token: '1:x'\n  poll_timeout: 25\n")

    main(["config-check", "-c", str(tmp_path / "config.yaml"), "-e", str(tmp_path / "missing.env")])

    out = capsys.readouterr().out
    assert "Configuration valid" in out
    assert "Poll timeout: 25s" in out


def test_cli_reports_bad_config(tmp_path, capsys):
    from tgbot_kit.__main__ import main

    with pytest.raises(SystemExit) as exc:
        main(["config-check", "-c", str(tmp_path / "nope.yaml")])

    assert exc.value.code == 1
    assert "not found" in capsys.readouterr().err


def test_cli_get_me_stops_bot(tmp_path, capsys, monkeypatch):
    from tg_factories import tg_user
    from tgbot_kit.__main__ import main
    from tgbot_kit.bot import Bot

    class StubBot:
        bot_self = tg_user(77, first_name="Kit", username="kit_bot")
        stopped = False

        async def stop(self):
            StubBot.stopped = True

    async def from_config(cls, config, chat_provider):
        return StubBot()

    monkeypatch.setattr(Bot, "from_config", classmethod(from_config))
    (tmp_path / "config.yaml").write_text(
        f"bot:\n  token: '1:x'\nstorage:\n  db_path: '{tmp_path / 'bot.db'}'\n"
    )

    main(["get-me", "-c", str(tmp_path / "config.yaml"), "-e", str(tmp_path / "missing.env")])

    assert "@kit_bot" in capsys.readouterr().out
    assert StubBot.stopped


def test_setup_logging_quiets_client_loggers():
    import logging

    from tgbot_kit.log import setup_logging

    setup_logging("DEBUG")

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("telegram.ext").level == logging.WARNING
