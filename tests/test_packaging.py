import re
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]


def _pyproject() -> str:
    return (_ROOT / "pyproject.toml").read_text(encoding="utf-8")


def test_readme_points_at_a_project_document_if_declared():
    m = re.search(r'^readme\s*=\s*"([^"]+)"', _pyproject(), flags=re.MULTILINE)
    if m is None:
        return
    readme = m.group(1)
    assert readme.upper().startswith("README")
    assert (_ROOT / readme).is_file()


def test_packaged_default_config_exists():
    assert 'driftsketch = ["resource/*.yaml"]' in _pyproject()
    assert (_ROOT / "src" / "driftsketch" / "resource" / "default_config.yaml").is_file()
