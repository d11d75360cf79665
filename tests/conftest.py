'''
Shared fixtures.

Tests are pure: no files, no network.  Parallel policies are exercised by
lowering the chunk threshold so that small inputs still reach the pool.
'''
import pytest

import execution


@pytest.fixture
def parallel():
    previous = execution.configure(min_chunk=1, max_workers=4)
    yield execution.PAR
    execution.configure(max_workers=previous.max_workers, min_chunk=previous.min_chunk)
