import queue_dse


def test_wrong_argument_count(capsys):
    assert queue_dse.main(["1.0", "1.1"]) == 1
    assert "USAGE" in capsys.readouterr().out


def test_bad_strategy(capsys):
    assert queue_dse.main(["1.0", "1.1", "7", "1", "3.0", "2"]) == 1
    assert "assignment strategy" in capsys.readouterr().out


def test_bad_number(capsys):
    assert queue_dse.main(["one", "1.1", "0", "1", "3.0", "2"]) == 1
    assert capsys.readouterr().out.startswith("error:")


def test_invalid_range(capsys):
    assert queue_dse.main(["1.0", "1.1", "0", "1", "0.5", "2"]) == 1
    assert "empty sweep" in capsys.readouterr().out


def test_parse_args_maps_codes():
    config = queue_dse.parse_args(["2.0", "1.5", "0", "2", "1.8", "4"])
    assert config.policy == "random"
    assert config.parameter == "load"
    assert config.arrival_rate == 2.0 and config.service_rate == 1.5
    assert config.v_max == 1.8 and config.replications == 4


def test_full_run_writes_outputs(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert queue_dse.main(["1.0", "1.1", "0", "1", "1.3", "1"]) == 0
    out = capsys.readouterr().out
    assert "BEGIN SIMULATION" in out
    assert "seed,λ,μ,ρ,tbp,sbp" in out
    assert (tmp_path / "perf.csv").exists()
    assert (tmp_path / "rnd_avg_1.csv").exists()
    assert (tmp_path / "rnd_avg_1.png").exists()
