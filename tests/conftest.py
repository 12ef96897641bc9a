import os

os.environ.setdefault("TMDB_API_KEY", "test-secret-key")

import pytest


@pytest.fixture
def dummy_client():
    class Dummy:
        def __init__(self):
            self.calls = []

        async def get(self, url, params=None):
            self.calls.append((url, params))

            class FakeResp:
                status_code = 200
                is_success = True
                def json(self): return {}
            return FakeResp()
    return Dummy()
