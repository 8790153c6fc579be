import base64
import json
from pathlib import Path

import httpx
import pytest

from mldemo.client import cli
from mldemo.client.client import PredictionClient
from mldemo.client.config import Settings
from mldemo.common.errors import TransportError
from mldemo.stub.main import app


@pytest.fixture(autouse=True)
def plain_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    settings = Settings(API_BASE_URL="http://stub/api", LOG_JSON=False)
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    return settings


@pytest.fixture
def stub_backend(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """Route every client the CLI builds to the in-process contract stub."""
    urls: list[str] = []

    def factory(url: str, **kwargs) -> PredictionClient:
        urls.append(url)
        http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app))
        return PredictionClient(url, _client=http, **kwargs)

    monkeypatch.setattr(cli, "PredictionClient", factory)
    return urls


def test_encode_image_builds_png_data_url(tmp_path: Path):
    image = tmp_path / "digit.png"
    image.write_bytes(b"\x89PNG\r\n")

    encoded = cli.encode_image(image)

    prefix = "data:image/png;base64,"
    assert encoded.startswith(prefix)
    assert base64.b64decode(encoded[len(prefix) :]) == b"\x89PNG\r\n"


def test_survival_port_is_optional():
    args = cli.build_parser().parse_args(
        ["survival", "--pclass", "3", "--sex", "male", "--age", "22", "--fare", "7.25"]
    )
    assert args.embarked is None
    assert args.sibsp == 0


def test_unknown_domain_is_rejected():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["weather"])


def test_iris_command_prints_result(stub_backend: list[str], capsys):
    code = cli.main(["iris", "5.1", "3.5", "1.4", "0.2"])

    assert code == 0
    assert stub_backend == ["http://stub/api"]
    output = json.loads(capsys.readouterr().out)
    assert output["prediction"] == "setosa"
    assert output["confidence_source"] == "placeholder"


def test_survival_command_prints_result(stub_backend: list[str], capsys):
    code = cli.main(
        [
            "survival",
            "--pclass", "3",
            "--sex", "male",
            "--age", "22",
            "--sibsp", "1",
            "--fare", "7.25",
            "--embarked", "Q",
        ]
    )

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["survived"] == 0
    assert output["probability"] == 0.25


def test_url_flag_overrides_settings(stub_backend: list[str]):
    assert cli.main(["--url", "http://other/api", "sentiment", "good"]) == 0
    assert stub_backend == ["http://other/api"]


def test_digit_command_reads_image(stub_backend: list[str], tmp_path: Path, capsys):
    image = tmp_path / "digit.png"
    image.write_bytes(b"\x89PNG\r\n\x1a\n")

    assert cli.main(["digit", str(image)]) == 0
    assert 0 <= json.loads(capsys.readouterr().out)["prediction"] <= 9


def test_failed_prediction_exits_nonzero(monkeypatch: pytest.MonkeyPatch, capsys):
    async def failing(args):
        raise TransportError("HTTP error! status: 500", "iris", 500)

    monkeypatch.setattr(cli, "_main", failing)

    assert cli.main(["iris", "5.1", "3.5", "1.4", "0.2"]) == 1
    assert "iris prediction failed" in capsys.readouterr().err


@pytest.mark.parametrize("flag", ["--age", "--sibsp"])
def test_negative_passenger_values_exit_nonzero(stub_backend: list[str], flag: str, capsys):
    argv = ["survival", "--pclass", "3", "--sex", "male", "--age", "22", "--fare", "7.25"]
    argv += [flag, "-1"]

    assert cli.main(argv) == 1
    assert "invalid survival input" in capsys.readouterr().err


def test_missing_image_exits_nonzero(stub_backend: list[str], tmp_path: Path, capsys):
    assert cli.main(["digit", str(tmp_path / "missing.png")]) == 1
    assert "cannot read input" in capsys.readouterr().err
