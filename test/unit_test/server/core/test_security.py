import pytest

from affine_cloud.server.core.security import generate_token, hash_password, is_valid_email, verify_password


class TestPasswordHashing:
    def test_roundtrip(self):
        hashed = hash_password("correct horse")

        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_salted(self):
        assert hash_password("same") != hash_password("same")

    @pytest.mark.parametrize("hashed", ["", "no-separator", "zz$abcd"])
    def test_malformed_hash(self, hashed):
        assert not verify_password("any", hashed)


class TestEmailValidation:
    @pytest.mark.parametrize("email", ["u1@affine.pro", "first.last+tag@sub.affine.pro"])
    def test_valid(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["", "u1", "u1@affine", "u1 @affine.pro", "@affine.pro"])
    def test_invalid(self, email):
        assert not is_valid_email(email)


def test_generate_token():
    token = generate_token()

    assert len(token) >= 43
    assert token != generate_token()
    assert all(c.isalnum() or c in "-_" for c in token)
