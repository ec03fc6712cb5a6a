"""
Tests for the root run.py command line.
"""
import importlib.util
import sys
from pathlib import Path

import pytest

RUN_PY = Path(__file__).resolve().parent.parent / "run.py"

HOCR = """<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
 <body>
  <div class='ocr_page' id='page_1' title='bbox 0 0 200 100'>
   <span class='ocr_line' id='line_1_1' title="bbox 10 10 90 30">
    <span class='ocrx_word' id='word_1_1' title='bbox 10 10 90 30'>Total</span>
   </span>
   <span class='ocr_line' id='line_1_2' title="bbox 10 70 60 90">
    <span class='ocrx_word' id='word_1_2' title='bbox 10 70 60 90'>12</span>
   </span>
  </div>
 </body>
</html>
"""


@pytest.fixture
def run_module():
    spec = importlib.util.spec_from_file_location("table_capture_run", RUN_PY)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def hocr_path(tmp_path):
    path = tmp_path / "capture.hocr"
    path.write_text(HOCR, encoding="utf-8")
    return path


class TestRunCli:

    def test_save_writes_next_to_input(self, run_module, hocr_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["run.py", "--hocr_path", str(hocr_path),
                                          "--horizontal", "0.5", "--format", "markdown", "--save"])
        run_module.main()
        out = hocr_path.with_suffix(".md")
        assert out.read_text(encoding="utf-8") == "| Total |\n| --- |\n| 12 |"

    def test_without_save_prints(self, run_module, hocr_path, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["run.py", "--hocr_path", str(hocr_path), "--horizontal", "0.5"])
        run_module.main()
        assert capsys.readouterr().out.strip() == '"Total"\n"12"'
        assert not hocr_path.with_suffix(".csv").exists()

    def test_missing_input_exits_1(self, run_module, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["run.py", "--hocr_path", str(tmp_path / "nope.hocr")])
        with pytest.raises(SystemExit) as exc:
            run_module.main()
        assert exc.value.code == 1
