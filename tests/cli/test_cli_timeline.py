import json
from unittest.mock import patch

import pytest

from src.cli.timeline import main as timeline_main
from src.services.db_service import DatabaseService


def run_cli(argv):
    with patch("sys.argv", ["timeline.py", *argv]):
        with pytest.raises(SystemExit) as e:
            timeline_main()
    return e.value.code


@pytest.fixture
def empty_db_path(tmp_path):
    path = str(tmp_path / "empty.db")
    service = DatabaseService(path)
    service.connect()
    service.close()
    return path


def test_seed(tmp_path, seed_dir, capsys):
    db_path = str(tmp_path / "new.db")

    code = run_cli(
        [
            "seed",
            "-d",
            db_path,
            "--flights",
            str(seed_dir / "flights.json"),
            "--work-packages",
            str(seed_dir / "workPackages.json"),
        ]
    )

    assert code == 0
    out, _ = capsys.readouterr()
    assert "Seeded 5 flights and 6 work packages" in out


def test_seed_failure(tmp_path, capsys):
    with patch("src.cli.timeline.seed_database", side_effect=ValueError("bad seed")):
        code = run_cli(["seed", "-d", str(tmp_path / "x.db"), "--flights", "f.json"])

    assert code == 1


def test_seed_failure_verbose_reraises(tmp_path):
    with patch("src.cli.timeline.seed_database", side_effect=ValueError("bad seed")):
        argv = ["timeline.py", "-v", "seed", "-d", str(tmp_path / "x.db")]
        with patch("sys.argv", argv):
            with pytest.raises(ValueError, match="bad seed"):
                timeline_main()


def test_demo(seeded_db_path, capsys):
    code = run_cli(["demo", "-d", seeded_db_path, "--count", "12", "--seed", "7"])

    assert code == 0
    out, _ = capsys.readouterr()
    assert "Inserted 12 demo work packages" in out

    service = DatabaseService(seeded_db_path)
    service.connect()
    try:
        assert service.count_work_packages() == 6 + 12
        assert service.get_work_package("DEMO-WP-000").registration in [
            "N123AB",
            "N456CD",
            "N789EF",
        ]
    finally:
        service.close()


def test_layout_window(seeded_db_path, capsys):
    code = run_cli(
        [
            "layout",
            "-d",
            seeded_db_path,
            "--start",
            "2024-04-15T00:00:00.000Z",
            "--end",
            "2024-04-16T00:00:00.000Z",
        ]
    )

    assert code == 0
    out, _ = capsys.readouterr()
    data = json.loads(out)
    assert [row["key"] for row in data["rows"]] == ["N123AB", "N456CD", "N789EF"]
    assert data["totalHeight"] == 217


def test_layout_options(seeded_db_path, capsys):
    code = run_cli(
        [
            "layout",
            "-d",
            seeded_db_path,
            "--start",
            "2024-04-15T00:00:00.000Z",
            "--end",
            "2024-04-15T12:10:00.000Z",
            "--pixels-per-hour",
            "200",
            "--round-ticks",
            "--pretty",
        ]
    )

    assert code == 0
    out, _ = capsys.readouterr()
    assert out.startswith("{\n")
    header = json.loads(out)["header"]
    assert len(header["ticks"]) == 27
    assert header["ticks"][1]["leftPx"] == 100


def test_layout_whole_data_set(seeded_db_path, capsys):
    code = run_cli(["layout", "-d", seeded_db_path])

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["window"]["max"] == "2024-04-16T11:45:00.000Z"


def test_layout_empty_database_without_window(empty_db_path):
    assert run_cli(["layout", "-d", empty_db_path]) == 1


def test_layout_requires_both_bounds(seeded_db_path):
    code = run_cli(
        ["layout", "-d", seeded_db_path, "--start", "2024-04-15T00:00:00.000Z"]
    )

    assert code == 1


def test_layout_missing_database(tmp_path):
    assert run_cli(["layout", "-d", str(tmp_path / "missing.db")]) == 1


def test_serve(seed_dir):
    with patch("uvicorn.run") as mock_run, patch(
        "src.core.logging_config.setup_logging"
    ) as mock_logging, patch("src.core.logging_config.shutdown_logging"):
        code = run_cli(
            [
                "serve",
                "-d",
                ":memory:",
                "--host",
                "127.0.0.1",
                "--port",
                "9001",
                "--seed-dir",
                str(seed_dir),
            ]
        )

    assert code == 0
    mock_run.assert_called_once()
    mock_logging.assert_called_once_with(debug_mode=False)
    assert mock_run.call_args.kwargs == {"host": "127.0.0.1", "port": 9001}


def test_no_command():
    assert run_cli([]) == 1


@pytest.mark.parametrize("scale", ["0", "-100"])
def test_layout_rejects_non_positive_scale(seeded_db_path, scale, capsys):
    code = run_cli(
        [
            "layout",
            "-d",
            seeded_db_path,
            "--start",
            "2024-04-15T00:00:00.000Z",
            "--end",
            "2024-04-16T00:00:00.000Z",
            "--pixels-per-hour",
            scale,
        ]
    )

    assert code == 1
    assert capsys.readouterr().out == ""
