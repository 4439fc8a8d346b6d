import pytest

from webworker.config import Config
from webworker.handler import RequestHandler


@pytest.fixture
def docroot(tmp_path):
    (tmp_path / "index.html").write_bytes(b"<html>\n<body>hello</body>\n</html>\n")
    (tmp_path / "server.html").write_bytes(b"<cs371server>\n<p>after</p>\n")
    (tmp_path / "date.html").write_bytes(b"<cs371date>\n<p>after</p>\n")
    (tmp_path / "sub").mkdir()
    return tmp_path


@pytest.fixture
def config(docroot):
    return Config(root=str(docroot))


@pytest.fixture
def handler(config):
    return RequestHandler(config)
