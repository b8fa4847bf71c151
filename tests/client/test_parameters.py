from dataclasses import dataclass

import pytest

from oauth2_client.client.parameters import (
    AUTHORIZATION_FIELDS,
    REFRESH_TOKEN_FIELDS,
    TOKEN_FIELDS,
    bind_accessors,
    resolve_parameters,
    select_accessors,
)
from oauth2_client.shared.exceptions import OAuth2ConfigurationError
from oauth2_client.shared.identity import ClientIdentity


def _identity(**overrides) -> ClientIdentity:
    defaults = dict(
        client_id="abc",
        redirect_uri="https://cb",
        authorization_endpoint="https://auth/ep",
        token_endpoint="https://auth/token",
    )
    defaults.update(overrides)
    return ClientIdentity(**defaults)


class MinimalProvider:
    """Only the required capabilities."""

    def get_client_id(self) -> str:
        return "abc"

    def get_redirect_uri(self) -> str:
        return "https://cb"

    def get_authorization_endpoint(self) -> str:
        return "https://auth/ep"

    def get_token_endpoint(self) -> str:
        return "https://auth/token"


# ===========================================================================
# optional field omission (table-driven)
# ===========================================================================


@dataclass
class OptionalFieldCase:
    desc: str
    field: str
    param: str
    value: str | None


OPTIONAL_FIELD_CASES = [
    OptionalFieldCase("client_secret absent", "client_secret", "client_secret", None),
    OptionalFieldCase("client_secret present", "client_secret", "client_secret", "s3cret"),
    OptionalFieldCase("scope absent", "scope", "scope", None),
    OptionalFieldCase("scope present", "scope", "scope", "read write"),
    OptionalFieldCase("state absent", "state", "state", None),
    OptionalFieldCase("state present", "state", "state", "xyz"),
]


@pytest.mark.parametrize("case", OPTIONAL_FIELD_CASES, ids=lambda c: c.desc)
def test_optional_fields_omitted_when_absent(case: OptionalFieldCase):
    accessors = bind_accessors(_identity(**{case.field: case.value}))

    params = resolve_parameters(accessors)

    if case.value is None:
        assert case.param not in params
    else:
        assert params[case.param] == [case.value]


def test_encoded_mode_encodes_each_value():
    accessors = select_accessors(bind_accessors(_identity(scope="read write")), AUTHORIZATION_FIELDS)

    params = resolve_parameters(accessors, encode=True)

    assert params["redirect_uri"] == ["https%3A%2F%2Fcb"]
    assert params["scope"] == ["read%20write"]


def test_unencoded_mode_passes_values_raw():
    accessors = select_accessors(bind_accessors(_identity(scope="read write")), AUTHORIZATION_FIELDS)

    params = resolve_parameters(accessors)

    assert params["redirect_uri"] == ["https://cb"]
    assert params["scope"] == ["read write"]


@pytest.mark.parametrize(
    "fields, expected",
    [
        (AUTHORIZATION_FIELDS, ["response_type", "client_id", "redirect_uri", "scope", "state"]),
        (TOKEN_FIELDS, ["redirect_uri", "client_id", "client_secret"]),
        (REFRESH_TOKEN_FIELDS, ["client_id", "client_secret"]),
    ],
    ids=["authorization", "token", "refresh"],
)
def test_field_tables_keep_order(fields, expected):
    identity = _identity(client_secret="s", scope="read", state="xyz")

    params = resolve_parameters(select_accessors(bind_accessors(identity), fields))

    assert list(params) == expected


def test_accessors_are_invoked_per_resolution():
    states = iter(["first", "second"])

    class RotatingState(MinimalProvider):
        def get_state(self) -> str:
            return next(states)

    accessors = bind_accessors(RotatingState())

    assert resolve_parameters(accessors)["state"] == ["first"]
    assert resolve_parameters(accessors)["state"] == ["second"]


def test_missing_optional_capabilities_fall_back_to_defaults():
    params = resolve_parameters(bind_accessors(MinimalProvider()))

    assert params == {
        "response_type": ["code"],
        "client_id": ["abc"],
        "redirect_uri": ["https://cb"],
    }


@pytest.mark.parametrize("missing", ["get_client_id", "get_redirect_uri"])
def test_missing_required_capability_is_a_configuration_error(missing: str):
    provider_cls = type("Broken", (MinimalProvider,), {missing: None})

    with pytest.raises(OAuth2ConfigurationError, match=missing):
        bind_accessors(provider_cls())


def test_non_callable_capability_is_a_configuration_error():
    provider_cls = type("Broken", (MinimalProvider,), {"get_client_id": "abc"})

    with pytest.raises(OAuth2ConfigurationError, match="not callable"):
        bind_accessors(provider_cls())


def test_accessor_failure_propagates_unwrapped():
    class FailingScope(MinimalProvider):
        def get_scope(self) -> str:
            raise RuntimeError("scope store unavailable")

    accessors = bind_accessors(FailingScope())

    with pytest.raises(RuntimeError, match="scope store unavailable"):
        resolve_parameters(accessors)
