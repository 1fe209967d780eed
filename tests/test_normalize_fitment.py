from shopware_mcp_server.matching.fitment import Fitment, is_present, resolve_fitment
from shopware_mcp_server.matching.normalize import normalize


def test_normalize_ignores_case_and_diacritics():
    assert normalize("É " + "é") == normalize("e e")
    assert normalize("Citroën") == "citroen"
    assert normalize("ANHÄNGERKUPPLUNG") == "anhangerkupplung"


def test_normalize_none_is_empty():
    assert normalize(None) == ""
    assert normalize("") == ""


def test_normalize_non_string_does_not_raise():
    assert normalize(42) == "42"


def test_explicit_brand_wins_over_vehicle_text():
    fitment = resolve_fitment(brand="BMW", vehicle_text="Audi A4 Avant")
    assert fitment.brand == "BMW"
    assert fitment.model == "A4"
    assert fitment.variant == "Avant"


def test_single_token_vehicle_text_is_ignored():
    assert resolve_fitment(vehicle_text="Audi") == Fitment()


def test_two_tokens_fill_brand_and_model_only():
    fitment = resolve_fitment(vehicle_text="  citroen   c5 ")
    assert fitment == Fitment(brand="citroen", model="c5")


def test_remaining_tokens_become_variant():
    fitment = resolve_fitment(vehicle_text="citroen c5   limousine  hdi")
    assert fitment.variant == "limousine hdi"


def test_explicit_variant_not_overwritten():
    fitment = resolve_fitment(variant="Tourer", vehicle_text="citroen c5 limousine")
    assert fitment.variant == "Tourer"


def test_blank_fields_are_absent():
    fitment = resolve_fitment(brand="   ", model="", variant=None)
    assert fitment == Fitment()
    assert not is_present("  ")
    assert is_present(" Golf ")


def test_blank_explicit_field_can_be_filled_from_text():
    fitment = resolve_fitment(brand=" ", vehicle_text="VW Golf")
    assert fitment.brand == "VW"


def test_resolved_fields_are_trimmed():
    fitment = resolve_fitment(brand=" VW ", model=" Golf\t")
    assert fitment.brand == "VW"
    assert fitment.model == "Golf"
