import pytest

from cryptochat.core.coins import ALIASES, WORD, CoinDirectory


@pytest.mark.parametrize(("alias", "coin_id"), ALIASES)
def test_resolve_is_case_insensitive(directory, alias, coin_id):
    for variant in (alias, alias.upper(), alias.capitalize()):
        ref = directory.resolve(variant)
        assert ref is not None
        assert ref.id == coin_id


def test_resolve_inside_sentence(directory):
    assert directory.resolve("What's the price of Cardano today?").id == "cardano"
    assert directory.resolve("how much is SHIB").id == "shiba-inu"
    assert directory.resolve("nothing to see") is None


def test_first_alias_in_table_order_wins(directory):
    # both coins are mentioned; bitcoin is declared first
    assert directory.resolve("ethereum or bitcoin?").id == "bitcoin"


def test_substring_policy_false_positive_is_known(directory):
    # "dot" inside "anecdote" resolves to polkadot under the default policy
    assert directory.resolve("tell me an anecdote").id == "polkadot"


def test_word_policy_requires_standalone_alias():
    strict = CoinDirectory(policy=WORD)
    assert strict.resolve("tell me an anecdote") is None
    assert strict.resolve("price of DOT please").id == "polkadot"
    assert strict.resolve("shiba-inu chart").id == "shiba-inu"


def test_coin_refs_carry_display_data(directory):
    btc = directory.get("bitcoin")
    assert btc.display_name == "Bitcoin"
    assert btc.symbol == "BTC"
    assert btc.label == "Bitcoin (BTC)"


def test_coin_for_synthesizes_unknown_ids(directory):
    ref = directory.coin_for("monero")
    assert (ref.id, ref.display_name, ref.symbol) == ("monero", "monero", "MONERO")
    assert directory.coin_for("Bitcoin") == directory.get("bitcoin")


def test_provider_ids_translate_both_ways(directory):
    ripple = directory.get("ripple")
    assert directory.provider_id(ripple, "coincap") == "xrp"
    assert directory.provider_id(ripple, "coingecko") == "ripple"
    assert directory.from_provider_id("coincap", "xrp") == ripple
    assert directory.from_provider_id("coincap", "ripple") is None
    assert directory.from_provider_id("coingecko", "unknown-coin") is None


def test_supported_lists_each_coin_once(directory):
    ids = [c.id for c in directory.supported()]
    assert ids[:2] == ["bitcoin", "ethereum"]
    assert len(ids) == len(set(ids)) == 10  # noqa: PLR2004


def test_aliases_must_point_at_known_coins():
    with pytest.raises(ValueError):
        CoinDirectory(aliases=(("moon", "mooncoin"),))


def test_unknown_policy_rejected():
    with pytest.raises(ValueError):
        CoinDirectory(policy="fuzzy")
