"""Unit tests for user create and patch inputs."""

import pytest

from users.domain.inputs import (
    UNSET,
    EducationInfoPatch,
    MailingAddressPatch,
    MLHTermsPatch,
    UserPatch,
)
from users.domain.value_objects import OAuthIdentity, Pronouns, Provider


class TestUnset:
    """Tests for the absent-slot sentinel."""

    def test_unset_is_falsy_and_not_none(self):
        assert not UNSET
        assert UNSET is not None
        assert repr(UNSET) == "UNSET"


class TestUserPatch:
    """Tests for partial user updates."""

    def test_default_patch_is_empty(self):
        patch = UserPatch()

        assert patch.is_empty()
        assert patch.present_fields() == {}

    def test_present_fields_keep_explicit_none(self):
        patch = UserPatch(first_name="Ada", age=None)

        assert patch.present_fields() == {"first_name": "Ada", "age": None}
        assert not patch.is_empty()

    def test_present_fields_follow_declaration_order(self):
        patch = UserPatch(shirt_size=None, email="a@b.c", first_name="Ada")

        assert list(patch.present_fields()) == ["first_name", "email", "shirt_size"]

    @pytest.mark.parametrize(
        "field", ["first_name", "last_name", "email", "phone_number"]
    )
    def test_required_column_cannot_be_nulled(self, field):
        with pytest.raises(ValueError, match=field):
            UserPatch(**{field: None})

    @pytest.mark.parametrize("field", ["mailing_address", "education_info", "mlh"])
    def test_satellite_cannot_be_nulled(self, field):
        with pytest.raises(ValueError, match=field):
            UserPatch(**{field: None})

    def test_pronouns_can_be_cleared(self):
        assert UserPatch(pronouns=None).present_fields() == {"pronouns": None}


class TestSatellitePatches:
    """Tests for nested satellite patches."""

    def test_mailing_address_patch_keeps_present_fields(self):
        patch = MailingAddressPatch(city="Tampa", address_lines=[])

        assert patch.present_fields() == {"city": "Tampa", "address_lines": []}

    def test_empty_mailing_address_patch_is_rejected(self):
        with pytest.raises(ValueError, match="no fields"):
            MailingAddressPatch()

    def test_mailing_address_fields_cannot_be_nulled(self):
        with pytest.raises(ValueError, match="postal_code"):
            MailingAddressPatch(postal_code=None)

    def test_education_level_can_be_cleared(self):
        assert EducationInfoPatch(level=None).present_fields() == {"level": None}

    def test_education_name_cannot_be_nulled(self):
        with pytest.raises(ValueError, match="name"):
            EducationInfoPatch(name=None)

    def test_mlh_false_is_a_present_value(self):
        assert MLHTermsPatch(share_info=False).present_fields() == {"share_info": False}

    def test_empty_mlh_patch_is_rejected(self):
        with pytest.raises(ValueError):
            MLHTermsPatch()


class TestValueObjects:
    """Tests for string forms of value objects."""

    def test_pronouns_string(self):
        assert str(Pronouns("they", "them")) == "they/them"

    def test_oauth_identity_string(self):
        assert str(OAuthIdentity(Provider.GMAIL, "abc")) == "GMAIL:abc"
