import pytest

from entmoot.entish.engine.config import config
from entmoot.entish.engine.frame_factory import FrameFactory
from entmoot.entish.parser.entish_parser import EntishParser


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts from the default configuration."""
    config.reset()
    FrameFactory.reset()
    yield
    config.reset()
    FrameFactory.reset()


@pytest.fixture(scope="session")
def parser():
    return EntishParser()


@pytest.fixture
def parse_clause(parser):
    """Parse the clause of a query, e.g. parse_clause("p(x) & q(x)")."""
    def parse(text):
        return parser.parse(f"? {text}.")[0].clause
    return parse


@pytest.fixture
def parse_expr(parser):
    """Parse a single expression by wrapping it in a fact field."""
    def parse(text):
        return parser.parse(f"p({text}).")[0].fields[0]
    return parse


@pytest.fixture
def parse_statement(parser):
    def parse(text):
        return parser.parse(text)[0]
    return parse
