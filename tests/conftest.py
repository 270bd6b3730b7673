from types import SimpleNamespace

import pytest


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="req-0001",
        function_name="fn-fastdata-kds-queuing",
    )
