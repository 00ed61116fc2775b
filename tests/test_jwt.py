import pytest

from storefront.domain.errors import Unauthorized
from storefront.utils.jwt import decode_jwt, get_bearer_token, subject_from_header

from tests.conftest import make_token


class TestBearerToken:
    def test_extracts_token_case_insensitive(self):
        assert get_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"
        assert get_bearer_token("bearer   abc") == "abc"

    @pytest.mark.parametrize("header", [None, "", "Basic dXNlcjpwdw=="])
    def test_missing_or_other_scheme(self, header):
        assert get_bearer_token(header) is None


class TestSubject:
    def test_sub_claim(self):
        assert subject_from_header(f"Bearer {make_token('user-7')}") == "user-7"

    def test_external_id_fallback(self):
        token = make_token("", external_id="ext-9")
        assert subject_from_header(f"Bearer {token}") == "ext-9"

    def test_payload_without_padding_decodes(self):
        assert decode_jwt(make_token("x"))["sub"] == "x"

    @pytest.mark.parametrize(
        "header",
        [None, "Bearer ", "Bearer not-a-jwt", "Bearer a.%%%.c", f"Bearer {make_token('', role='admin')}"],
    )
    def test_unusable_tokens_are_unauthorized(self, header):
        with pytest.raises(Unauthorized):
            subject_from_header(header)
