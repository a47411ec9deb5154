import allure
from click.testing import CliRunner

from task_progress import __version__
from task_progress.main import task_progress

pytestmark = [
    allure.epic("Progress Reporter"),
    allure.feature("CLI"),
]


def test_version():
    assert __version__


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(task_progress, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
