import os.path

import pytest

from badger.conf import Config
from badger.utils.testutils import InMemoryTransport


@pytest.fixture
def project_root():
    return os.path.dirname(os.path.abspath(__file__))


@pytest.fixture
def config(project_root):
    return Config(
        'dummy-api-key',
        endpoint='https://api.example.com',
        environment_name='test',
        hostname='hickyblue',
        root=project_root,
    )


@pytest.fixture
def transport():
    return InMemoryTransport()
