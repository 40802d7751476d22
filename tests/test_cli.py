import logging
from pathlib import Path

import pytest
from PIL import Image

import main as main_module
from collage import config


@pytest.fixture()
def quiet_logging(monkeypatch):
    monkeypatch.setattr(
        main_module, "configure_logging", lambda *_: logging.getLogger(config.LOGGER_NAME)
    )


def _images(tmp_path: Path, count: int):
    paths = []
    for i in range(count):
        path = tmp_path / f"{i}.png"
        Image.new("RGB", (40 + i, 30), (i * 30 % 256, 0, 0)).save(path)
        paths.append(str(path))
    return paths


def test_cli_exports_png(tmp_path, quiet_logging):
    out = tmp_path / "collage.png"
    code = main_module.main(
        [*_images(tmp_path, 7), "-o", str(out), "--spacing", "0", "--scale", "1",
         "--cell-size", "50"]
    )
    assert code == 0
    with Image.open(out) as saved:
        # 3 columns x 3 rows of 50px cells, floored to the minimum canvas;
        # the grid is centred and its overflow clipped top and bottom
        assert saved.size == (400, 300)


def test_cli_jpeg_uses_jpeg_cell_size(tmp_path, quiet_logging):
    out = tmp_path / "collage.jpg"
    code = main_module.main(
        [*_images(tmp_path, 2), "-o", str(out), "--spacing", "0", "--scale", "1",
         "--quality", "80", "--canvas-bg", "#ffffff"]
    )
    assert code == 0
    with Image.open(out) as saved:
        assert saved.format == "JPEG"
        assert saved.size == (2 * config.JPEG_BASE_CELL_SIZE, config.JPEG_BASE_CELL_SIZE)


def test_cli_preset_and_columns(tmp_path, quiet_logging):
    out = tmp_path / "c.png"
    code = main_module.main(
        [*_images(tmp_path, 3), "-o", str(out), "--preset", "png-1x", "-c", "1",
         "--spacing", "0"]
    )
    assert code == 0
    with Image.open(out) as saved:
        assert saved.size == (512, 3 * 512)


def test_cli_fails_when_nothing_loads(tmp_path, quiet_logging, caplog):
    bogus = tmp_path / "bogus.txt"
    bogus.write_text("x")
    code = main_module.main([str(bogus), "-o", str(tmp_path / "c.png")])
    assert code == 1
    assert "could be loaded" in caplog.text


def test_cli_reports_export_errors(tmp_path, quiet_logging, caplog):
    code = main_module.main(
        [*_images(tmp_path, 1), "-o", str(tmp_path / "missing" / "c.png")]
    )
    assert code == 1
    assert "Export failed" in caplog.text


def test_cli_rejects_invalid_arguments(tmp_path, quiet_logging):
    with pytest.raises(SystemExit) as excinfo:
        main_module.main([*_images(tmp_path, 1), "--spacing", "-3"])
    assert excinfo.value.code == 2
    with pytest.raises(SystemExit):
        main_module.main([*_images(tmp_path, 1), "--canvas-bg", "nope"])


def test_configure_logging_is_idempotent(tmp_path, monkeypatch):
    logger = logging.getLogger(config.LOGGER_NAME)
    saved_handlers = list(logger.handlers)
    saved_propagate = logger.propagate
    saved_level = logger.level
    logger.handlers.clear()
    monkeypatch.setenv(config.LOG_LEVEL_ENV, "debug")
    try:
        first = main_module.configure_logging(tmp_path)
        second = main_module.configure_logging(tmp_path)
        assert first is second
        assert len(first.handlers) == 2
        assert first.level == logging.DEBUG
        assert first.propagate is False
        assert (tmp_path / config.LOG_FILE_NAME).exists()
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers[:] = saved_handlers
        logger.propagate = saved_propagate
        logger.setLevel(saved_level)


def test_cli_jpeg_preset_defaults_to_jpeg_file(tmp_path, quiet_logging, monkeypatch):
    images = _images(tmp_path, 1)
    monkeypatch.chdir(tmp_path)

    code = main_module.main([*images, "--preset", "jpeg-high", "--spacing", "0"])

    assert code == 0
    assert not (tmp_path / config.DEFAULT_PNG_NAME).exists()
    with Image.open(tmp_path / config.DEFAULT_JPEG_NAME) as saved:
        assert saved.format == "JPEG"
        # one 640px cell at the default 2x scale
        assert saved.size == (1280, 1280)


def test_cli_rejects_preset_with_mismatched_output(tmp_path, quiet_logging, caplog):
    out = tmp_path / "o.png"
    code = main_module.main([*_images(tmp_path, 1), "-o", str(out), "--preset", "jpeg-medium"])
    assert code == 1
    assert not out.exists()
    assert "Export failed" in caplog.text


def test_cli_defaults_to_png_without_preset(tmp_path, quiet_logging, monkeypatch):
    images = _images(tmp_path, 1)
    monkeypatch.chdir(tmp_path)
    assert main_module.main([*images, "--scale", "1"]) == 0
    with Image.open(tmp_path / config.DEFAULT_PNG_NAME) as saved:
        assert saved.format == "PNG"
