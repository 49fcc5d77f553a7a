from __future__ import annotations

import pytest

from core.catalogue import CATALOGUE, TOOL_PREFIX, build_request, canonical_name, get_spec
from core.models import Placement, RawConfig, StructuredConfig, tag_config

EXPECTED_ROUTES = {
    "setup_inbound_settings": ("POST", "/inbound-phone-settings"),
    "get_inbound_settings": ("GET", "/inbound-phone-settings"),
    "setup_phone_configuration": ("POST", "/api/phone-configuration"),
    "get_phone_configuration": ("GET", "/api/phone-configuration"),
    "initiate_call": ("POST", "/api/call"),
    "do_outbound_call": ("POST", "/do-outbound-phone-call"),
    "get_outbound_call_logs": ("GET", "/api/outbound-call-logs"),
    "get_inbound_call_logs": ("GET", "/api/inbound-call-logs"),
    "list_user_agents": ("GET", "/api/user-agents"),
    "get_user_agent": ("GET", "/api/user-agents/{id}"),
    "delete_user_agent": ("DELETE", "/api/user-agents/{id}"),
    "create_lead": ("POST", "/api/user-leads"),
    "bulk_upload_leads": ("POST", "/api/user-leads/bulk"),
    "list_leads": ("GET", "/api/user-leads"),
    "get_lead": ("GET", "/api/user-leads/{id}"),
    "update_lead": ("PATCH", "/api/user-leads/{id}"),
    "delete_lead": ("DELETE", "/api/user-leads/{id}"),
}

PATH_TOOLS = ["get_user_agent", "delete_user_agent", "get_lead", "update_lead", "delete_lead"]


def test_catalogue_matches_route_table() -> None:
    assert {name: (spec.method, spec.path) for name, spec in CATALOGUE.items()} == EXPECTED_ROUTES


def test_canonical_names_are_prefixed() -> None:
    assert canonical_name("list_leads") == "suarify_list_leads"
    assert canonical_name("suarify_list_leads") == "suarify_list_leads"
    assert all(spec.canonical_name.startswith(TOOL_PREFIX) for spec in CATALOGUE.values())


def test_get_spec_accepts_both_names() -> None:
    assert get_spec("get_lead") is get_spec("suarify_get_lead")
    with pytest.raises(KeyError, match="Unknown tool"):
        get_spec("suarify_book_flight")


def test_query_tools_forward_all_arguments_as_query() -> None:
    args = {"owner_email": "a@b.co", "limit": 10, "offset": 20}

    request = build_request(get_spec("list_leads"), args)

    assert request.params == args
    assert request.body is None


def test_body_tools_forward_all_arguments_as_body_in_order() -> None:
    args = {"owner_email": "a@b.co", "password": "LIVE", "receipient_phone": "+60123"}

    request = build_request(get_spec("do_outbound_call"), args)

    assert request.method == "POST"
    assert request.body == args
    assert list(request.body) == list(args)
    assert request.params is None


@pytest.mark.parametrize("name", PATH_TOOLS)
def test_id_only_appears_in_path(name: str) -> None:
    spec = get_spec(name)
    args = {"id": "lead-42", "owner_email": "a@b.co"} if spec.placement != Placement.PATH else {"id": "lead-42"}

    request = build_request(spec, args)

    assert request.path == spec.path.format(id="lead-42")
    assert "id" not in (request.params or {})
    assert "id" not in (request.body or {})


def test_path_query_forwards_rest_as_query() -> None:
    request = build_request(get_spec("delete_user_agent"), {"id": "9", "owner_email": "a@b.co"})

    assert request.path == "/api/user-agents/9"
    assert request.params == {"owner_email": "a@b.co"}


def test_path_body_forwards_rest_as_body() -> None:
    request = build_request(get_spec("update_lead"), {"id": "9", "receipient_name": "Bea"})

    assert request.method == "PATCH"
    assert request.body == {"receipient_name": "Bea"}


def test_path_id_is_url_quoted() -> None:
    request = build_request(get_spec("get_lead"), {"id": "a/b c"})

    assert request.path == "/api/user-leads/a%2Fb%20c"


@pytest.mark.parametrize("value, segment", [(".", "%2E"), ("..", "%2E%2E"), ("...", "..."), ("a.b", "a.b")])
def test_dot_segment_ids_are_encoded(value: str, segment: str) -> None:
    request = build_request(get_spec("delete_lead"), {"id": value})

    assert request.path == f"/api/user-leads/{segment}"


def test_path_tools_require_id() -> None:
    with pytest.raises(KeyError):
        build_request(get_spec("get_lead"), {})


def test_config_value_is_forwarded_unchanged() -> None:
    spec = get_spec("setup_phone_configuration")
    raw = '{"main_voice":"alloy"}'
    structured = {"main_voice": "alloy"}

    raw_request = build_request(spec, {"tokenid": "t1", "params": raw})
    structured_request = build_request(spec, {"tokenid": "t1", "params": structured})

    assert raw_request.body["params"] == raw
    assert structured_request.body["params"] == structured


def test_tag_config_distinguishes_representations() -> None:
    assert tag_config("{}") == RawConfig("{}")
    assert tag_config({"a": 1}) == StructuredConfig({"a": 1})
    with pytest.raises(TypeError):
        tag_config(42)


def test_summaries() -> None:
    assert get_spec("list_leads").summarize({}, [{"id": 1}, {"id": 2}]) == "Retrieved 2 leads."
    assert get_spec("list_leads").summarize({}, {"leads": []}) == "Retrieved 0 leads."
    assert (
        get_spec("setup_inbound_settings").summarize({"phonenumber": "0123"}, {})
        == "Inbound settings configured for 0123"
    )
    assert get_spec("delete_lead").summarize({"id": "7"}, None) == "Lead 7 deleted."
