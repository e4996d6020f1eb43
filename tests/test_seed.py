from app.data import seed as seed_module
from app.data.models.product import VariantModel


def test_seed_runs_once(monkeypatch, session_factory, in_session):
    monkeypatch.setattr(seed_module, "SessionLocal", session_factory)

    seed_module.seed()
    seed_module.seed()

    expected = sum(len(p.variants) for p in seed_module.DEMO_PRODUCTS)
    assert in_session(lambda s: s.query(VariantModel).count()) == expected
