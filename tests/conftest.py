from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from fluxer.app import build_reconciler
from fluxer.config import OperatorConfig
from tests.support.cluster import FIXED_NOW, FakeCluster

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from fluxer.domain.reconciliation import Reconciler


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def reconciler(cluster: FakeCluster, clock: Callable[[], datetime]) -> Reconciler:
    return build_reconciler(cluster.clients(), config=OperatorConfig(), clock=clock)
