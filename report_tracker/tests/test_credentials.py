# tests/test_credentials.py
from report_tracker.credentials import get_password_hash, verify_password


def test_hash_then_verify():
    digest = get_password_hash("employee123")
    assert digest != "employee123"
    assert verify_password("employee123", digest)


def test_wrong_password():
    digest = get_password_hash("employee123")
    assert not verify_password("employee124", digest)


def test_each_hash_is_salted():
    assert get_password_hash("same") != get_password_hash("same")


def test_unrecognised_digest_is_a_mismatch():
    assert not verify_password("admin123", "admin123")
    assert not verify_password("admin123", "")
