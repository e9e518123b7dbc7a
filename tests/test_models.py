import pytest

from bondvalues.models import (
    GetBond200Response,
    GetBond404Response,
    GetBondCsvPathParams,
    GetBondPathParams,
    ValidationError,
    check_xss_list,
    check_xss_map,
    check_xss_string,
    is_html,
)


@pytest.mark.parametrize("text", ["<script>", "a&b", "x=1", "a b", 'say "hi"'])
def test_is_html_detects_sensitive_text(text):
    assert is_html(text) is True


@pytest.mark.parametrize("text", ["EDO0125", "ROD1235", ""])
def test_is_html_accepts_plain_text(text):
    assert is_html(text) is False


def test_check_xss_string_raises_on_html():
    with pytest.raises(ValidationError, match="xss detected"):
        check_xss_string("<b>bold</b>")


def test_check_xss_string_passes_plain():
    assert check_xss_string("EDO0125") is None


def test_check_xss_list():
    assert check_xss_list(["EDO0125", "ROD0837"]) is None
    with pytest.raises(ValidationError):
        check_xss_list(["EDO0125", "<i>"])


def test_check_xss_map_checks_keys_and_values():
    assert check_xss_map({"id": "EDO0125"}) is None
    with pytest.raises(ValidationError):
        check_xss_map({"<k>": "v"})
    with pytest.raises(ValidationError):
        check_xss_map({"k": "<v>"})


def test_check_xss_map_validates_nested_models():
    assert check_xss_map({"bond": GetBond200Response("EDO0125", "Edo")}) is None
    with pytest.raises(ValidationError):
        check_xss_map({"bond": GetBond200Response("<x>", "Edo")})


def test_path_params_hold_id():
    assert GetBondPathParams("EDO0125").id == "EDO0125"
    assert GetBondCsvPathParams(id="ROD0837") == GetBondCsvPathParams("ROD0837")


def test_200_response_to_query():
    response = GetBond200Response(id="EDO0125", name="Edo")
    assert response.to_query() == "id,EDO0125,name,Edo"
    assert str(response) == response.to_query()


def test_200_response_round_trip():
    response = GetBond200Response(id="ROD0837", name="Rodzinna")
    assert GetBond200Response.from_query(response.to_query()) == response


def test_200_response_first_value_wins():
    parsed = GetBond200Response.from_query("id,A,name,B,id,C")
    assert parsed == GetBond200Response(id="A", name="B")


def test_200_response_missing_value():
    with pytest.raises(ValueError, match="Missing value while parsing GetBond200Response"):
        GetBond200Response.from_query("id,A,name")


def test_200_response_unexpected_key():
    with pytest.raises(ValueError, match="Unexpected key while parsing GetBond200Response"):
        GetBond200Response.from_query("id,A,colour,B")


def test_200_response_missing_field():
    with pytest.raises(ValueError, match="name missing in GetBond200Response"):
        GetBond200Response.from_query("id,A")


def test_200_response_validate_and_dict():
    response = GetBond200Response(id="EDO0125", name="Edo")
    assert response.validate() is None
    assert response.to_dict() == {"id": "EDO0125", "name": "Edo"}
    with pytest.raises(ValidationError, match="name"):
        GetBond200Response(id="EDO0125", name="<img>").validate()


def test_404_response_query_round_trip():
    response = GetBond404Response(error="missing")
    assert response.to_query() == "error,missing"
    assert GetBond404Response.from_query(response.to_query()) == response


def test_404_response_parse_errors():
    with pytest.raises(ValueError, match="Missing value while parsing GetBond404Response"):
        GetBond404Response.from_query("")
    with pytest.raises(ValueError, match="Unexpected key while parsing GetBond404Response"):
        GetBond404Response.from_query("id,x")


def test_404_response_dict_and_validate():
    message = "Bond with ID NONEXISTENT not found"
    response = GetBond404Response(message)
    assert response.to_dict() == {"error": message}
    with pytest.raises(ValidationError, match="error"):
        response.validate()