import pytest

from keepsake.config import ProgressionConfig
from keepsake.domain.exceptions import InsufficientFunds, InvalidAmount
from keepsake.domain.profile import PlayerProfile
from keepsake.domain.progression import apply_experience, credit_shards, debit_shards, exp_to_next

CONFIG = ProgressionConfig()


@pytest.mark.parametrize(
    ("level", "expected"),
    [(1, 100), (2, 150), (3, 200), (5, 300), (9, 500), (10, 0), (12, 0)],
)
def test_exp_to_next_curve(level, expected):
    assert exp_to_next(level, CONFIG) == expected


def test_experience_carries_over_several_levels():
    profile = PlayerProfile(name="a")
    gained = apply_experience(profile, 250, CONFIG)
    assert gained == 2
    assert (profile.level, profile.exp, profile.exp_to_next) == (3, 0, 200)


def test_exact_threshold_levels_up():
    profile = PlayerProfile(name="a")
    apply_experience(profile, 100, CONFIG)
    assert (profile.level, profile.exp, profile.exp_to_next) == (2, 0, 150)


def test_partial_experience_stays_on_level():
    profile = PlayerProfile(name="a")
    assert apply_experience(profile, 99, CONFIG) == 0
    assert (profile.level, profile.exp) == (1, 99)


def test_level_cap_discards_excess():
    profile = PlayerProfile(name="a", level=9, exp=10, exp_to_next=500)
    assert apply_experience(profile, 100_000, CONFIG) == 1
    assert (profile.level, profile.exp, profile.exp_to_next) == (10, 0, 0)
    assert apply_experience(profile, 50, CONFIG) == 0
    assert (profile.level, profile.exp) == (10, 0)


def test_non_positive_experience_is_ignored():
    profile = PlayerProfile(name="a", exp=40)
    assert apply_experience(profile, 0, CONFIG) == 0
    assert apply_experience(profile, -30, CONFIG) == 0
    assert profile.exp == 40


@pytest.mark.parametrize("first", range(0, 400, 37))
@pytest.mark.parametrize("second", range(0, 400, 41))
@pytest.mark.parametrize(
    "start",
    [{}, {"level": 2, "exp": 30, "exp_to_next": 150}, {"level": 6, "exp": 349, "exp_to_next": 350}],
)
def test_split_experience_matches_single_grant(start, first, second):
    split = PlayerProfile(name="a", **start)
    apply_experience(split, first, CONFIG)
    apply_experience(split, second, CONFIG)

    combined = PlayerProfile(name="a", **start)
    apply_experience(combined, first + second, CONFIG)

    assert split == combined


def test_custom_curve():
    config = ProgressionConfig(max_level=3, base_exp=10, exp_step=5)
    profile = PlayerProfile(name="a", exp_to_next=10)
    apply_experience(profile, 25, config)
    assert (profile.level, profile.exp, profile.exp_to_next) == (3, 0, 0)


def test_credit_ignores_non_positive_amounts():
    profile = PlayerProfile(name="a", shards=10)
    assert credit_shards(profile, -5) == 10
    assert credit_shards(profile, 0) == 10
    assert credit_shards(profile, 15) == 25


def test_debit_rejects_overdraft_without_change():
    profile = PlayerProfile(name="a", shards=500)
    with pytest.raises(InsufficientFunds) as excinfo:
        debit_shards(profile, 750)
    assert excinfo.value.reason == "insufficient_funds"
    assert (excinfo.value.balance, excinfo.value.cost) == (500, 750)
    assert profile.shards == 500


def test_debit_exact_balance_and_negative_cost():
    profile = PlayerProfile(name="a", shards=750)
    assert debit_shards(profile, 750) == 0
    with pytest.raises(InvalidAmount):
        debit_shards(profile, -1)
