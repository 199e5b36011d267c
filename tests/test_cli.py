# tests/test_cli.py
import json
import subprocess
import sys
from pathlib import Path

from PIL import Image, ImageDraw

REPO_ROOT = Path(__file__).resolve().parents[1]


def create_dummy_image(path: Path):
    img = Image.new("RGB", (120, 80), color=(150, 120, 200))
    draw = ImageDraw.Draw(img)
    draw.rectangle([(10, 10), (60, 60)], fill=(200, 50, 50))
    draw.ellipse([(50, 30), (110, 75)], fill=(50, 200, 50))
    img.save(path)


def _run(*args):
    return subprocess.run(
        [sys.executable, "floss_pattern.py", *args],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
    )


def test_cli_writes_pattern_and_report(tmp_path):
    input_image = tmp_path / "dummy_input.png"
    create_dummy_image(input_image)
    output_dir = tmp_path / "output"

    result = _run(
        str(input_image),
        "--outdir", str(output_dir),
        "--detail", "90",
        "--max-colors", "4",
        "--scale", "2",
        "--report",
        "--seed", "1",
    )
    assert result.returncode == 0, f"CLI failed: {result.stderr}"

    png = output_dir / "dummy_input_pattern.png"
    report = output_dir / "dummy_input_pattern.json"
    assert png.exists()
    assert report.exists()

    # detail 90 -> 3 px per stitch -> 40x26 grid
    with Image.open(png) as im:
        assert im.size == (80, 52)
    data = json.loads(report.read_text(encoding="utf-8"))
    assert data["totalCells"] == 40 * 26
    assert 1 <= len(data["entries"]) <= 4
    assert "Total stitches" in result.stdout


def test_cli_folder_mode_with_jobs(tmp_path):
    for name in ("a.png", "b.png"):
        create_dummy_image(tmp_path / name)
    result = _run(str(tmp_path), "--jobs", "2", "--strategy", "kmeans", "--seed", "3")
    assert result.returncode == 0, f"CLI failed: {result.stderr}"
    assert (tmp_path / "a_pattern.png").exists()
    assert (tmp_path / "b_pattern.png").exists()
    assert result.stdout.index("=== a.png ===") < result.stdout.index("=== b.png ===")


def test_cli_rejects_malformed_override(tmp_path):
    input_image = tmp_path / "in.png"
    create_dummy_image(input_image)
    result = _run(str(input_image), "--override", "310")
    assert result.returncode == 2
    assert "[error]" in result.stderr


def test_cli_help_output():
    result = _run("--help")
    assert result.returncode == 0
    assert "usage:" in result.stdout.lower()
