import json

from typer.testing import CliRunner

from overlay_animator.cli import app

runner = CliRunner()


def _sample(tmp_path):
    path = tmp_path / "overlay.json"
    result = runner.invoke(app, ["sample-document", "--output", str(path)])
    assert result.exit_code == 0, result.output
    return path


def test_sample_document_is_loadable(tmp_path):
    path = _sample(tmp_path)
    data = json.loads(path.read_text(encoding="utf-8"))
    widget = data["widgets"][0]
    assert widget["widgetType"] == "alert"
    assert len(widget["animationTimeline"]["keyframes"]) == 3
    assert "zIndex" in widget["elements"][0]


def test_evaluate(tmp_path):
    path = _sample(tmp_path)
    result = runner.invoke(app, ["evaluate", str(path), "--time", "1.5", "--precision", "2"])
    assert result.exit_code == 0, result.output
    assert "Badge" in result.output
    assert "460.0" in result.output


def test_evaluate_unknown_widget(tmp_path):
    path = _sample(tmp_path)
    result = runner.invoke(app, ["evaluate", str(path), "--widget-id", "nope"])
    assert result.exit_code != 0


def test_frames_from_config(tmp_path, monkeypatch):
    path = _sample(tmp_path)
    out = tmp_path / "frames.json"
    config = tmp_path / "config.yaml"
    config.write_text(f"document: {path}\nfps: 10\noutput: {out}\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["frames", "--config", str(config)])
    assert result.exit_code == 0, result.output
    frames = json.loads(out.read_text(encoding="utf-8"))
    assert len(frames) == 30
    assert frames[-1]["time"] == 3.0


def test_spline():
    result = runner.invoke(app, ["spline", "0,0", "6,0", "12,0"])
    assert result.exit_code == 0
    assert result.output.strip() == "M 0 0 C 1 0, 4 0, 6 0 C 8 0, 11 0, 12 0"
    result = runner.invoke(app, ["spline", "oops"])
    assert result.exit_code != 0
