import pytest
from attrutil.context import Context

@pytest.fixture
def ctx():
    with Context() as c:
        yield c
