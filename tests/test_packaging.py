import sys
import tomllib
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


def test_declared_python_floor_supports_datetime_utc():
    project = tomllib.loads(PYPROJECT.read_text())["project"]
    assert project["requires-python"] == ">=3.11"
    assert sys.version_info >= (3, 11)


def test_declared_dependencies_cover_storage_and_suggestion_clients():
    names = {dep.split(">")[0].split("<")[0].split("[")[0].lower() for dep in tomllib.loads(PYPROJECT.read_text())["project"]["dependencies"]}
    assert {"boto3", "requests", "xhtml2pdf", "jinja2"} <= names
