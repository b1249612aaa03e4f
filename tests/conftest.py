import pytest

from pricer.core.types import OptionKind, PricingRequest
from pricer.db.store import create_store


@pytest.fixture
def store(tmp_path):
    s = create_store(f"sqlite:///{tmp_path / 'options.db'}")
    yield s
    s.close()


@pytest.fixture
def atm_call():
    return PricingRequest(S=100.0, K=100.0, r=0.05, sigma=0.2, T=1.0, kind=OptionKind.CALL)
