import pytest
from click.testing import CliRunner


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Click runner for invoking the `minecraft-colors` command."""
    return CliRunner()
