"""Tests for the donation splitter (F4)."""

import threading

import pytest

from tutoring.config.app_config import DonationConfig
from tutoring.core.donations import DonationSplitter, split_amount
from tutoring.core.errors import InvalidArgumentError, NotFoundError
from tutoring.core.reputation import Tier

GAUDS = "gaudslindo99@gmail.com"


@pytest.fixture
def splitter() -> DonationSplitter:
    return DonationSplitter(DonationConfig())


def _rate_to(tutors, score, times):
    tutor = tutors.get_tutor(GAUDS)
    for _ in range(times):
        tutor.apply_rating(score)
    return tutor


class TestSplitAmount:
    """Tests for the ceiling split arithmetic."""

    @pytest.mark.parametrize(
        "total, rate, expected",
        [
            (1000, 0.80, (800, 200)),
            (1001, 0.90, (900, 101)),
            (100, 0.40, (40, 60)),
            (100, 0.70, (70, 30)),
            (1, 0.80, (0, 1)),
            (999, 1.0, (999, 0)),
            (999, 0.0, (0, 999)),
        ],
    )
    def test_platform_share_rounds_up(self, total, rate, expected):
        assert split_amount(total, rate) == expected

    @pytest.mark.parametrize("total", [1, 7, 99, 101, 12345])
    @pytest.mark.parametrize("rate", [0.40, 0.80, 0.90])
    def test_shares_sum_to_total(self, total, rate):
        tutor_share, platform_share = split_amount(total, rate)
        assert tutor_share + platform_share == total
        assert tutor_share >= 0 and platform_share >= 0


class TestDonate:
    """Tests for DonationSplitter.donate."""

    def test_tutor_tier_split(self, splitter, tutors):
        split = splitter.donate(tutors, GAUDS, 1000)
        assert split.tier is Tier.TUTOR
        assert (split.tutor_share, split.platform_share) == (800, 200)
        assert tutors.total_money(GAUDS) == 800
        assert splitter.revenue == 200

    def test_top_tier_split(self, splitter, tutors):
        _rate_to(tutors, 5, 5)
        split = splitter.donate(tutors, GAUDS, 1000)
        assert split.tier is Tier.TOP
        assert split.tutor_share == 900

    def test_apprentice_tier_split(self, splitter, tutors):
        _rate_to(tutors, 1, 5)
        split = splitter.donate(tutors, GAUDS, 1000)
        assert split.tier is Tier.APPRENTICE
        assert split.tutor_share == 400
        assert splitter.revenue == 600

    def test_uses_tier_at_donation_time(self, splitter, tutors):
        splitter.donate(tutors, GAUDS, 1000)
        _rate_to(tutors, 5, 5)
        splitter.donate(tutors, GAUDS, 1000)
        assert tutors.total_money(GAUDS) == 800 + 900
        assert splitter.revenue == 200 + 100

    def test_custom_rates(self, tutors):
        config = DonationConfig(tutor_rates={Tier.APPRENTICE: 0.5, Tier.TUTOR: 0.5, Tier.TOP: 0.5})
        splitter = DonationSplitter(config)
        split = splitter.donate(tutors, GAUDS, 101)
        assert (split.tutor_share, split.platform_share) == (50, 51)

    @pytest.mark.parametrize("total", [0, -1, -500])
    def test_non_positive_amount(self, splitter, tutors, total):
        with pytest.raises(InvalidArgumentError, match="Error donating to tutor"):
            splitter.donate(tutors, GAUDS, total)
        assert tutors.total_money(GAUDS) == 0
        assert splitter.revenue == 0

    @pytest.mark.parametrize("total", [10.5, "100", True])
    def test_non_integer_amount(self, splitter, tutors, total):
        with pytest.raises(InvalidArgumentError):
            splitter.donate(tutors, GAUDS, total)

    def test_unknown_tutor(self, splitter, tutors):
        with pytest.raises(NotFoundError, match="Error donating to tutor"):
            splitter.donate(tutors, "lerigou@frozen.com", 100)
        assert splitter.revenue == 0

    @pytest.mark.parametrize("email", ["", "   ", None])
    def test_blank_email(self, splitter, tutors, email):
        with pytest.raises(InvalidArgumentError):
            splitter.donate(tutors, email, 100)

    def test_tutor_rate(self, splitter, tutors):
        assert splitter.tutor_rate(tutors, GAUDS) == 0.80
        with pytest.raises(NotFoundError, match="Error looking up tutor"):
            splitter.tutor_rate(tutors, "lerigou@frozen.com")


class TestRevenue:
    """Tests for the platform revenue counter."""

    def test_starts_at_zero(self, splitter):
        assert splitter.revenue == 0

    def test_accumulates_across_tutors(self, splitter, students, tutors):
        tutors.register_tutor("P2", 3, students.lookup("11715945"))
        splitter.donate(tutors, GAUDS, 1000)
        splitter.donate(tutors, "liviap2@gmail.com", 500)
        assert splitter.revenue == 200 + 100

    def test_reset(self, splitter, tutors):
        splitter.donate(tutors, GAUDS, 1000)
        splitter.reset()
        assert splitter.revenue == 0

    def test_restore(self, splitter):
        splitter.restore(1234)
        assert splitter.revenue == 1234

    @pytest.mark.parametrize("value", [-1, 1.5, True])
    def test_restore_rejects_bad_values(self, splitter, value):
        with pytest.raises(InvalidArgumentError):
            splitter.restore(value)

    def test_concurrent_donations_conserve_money(self, splitter, tutors):
        """Balance plus revenue equals everything donated, under contention."""

        def worker():
            for _ in range(200):
                splitter.donate(tutors, GAUDS, 7)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert tutors.total_money(GAUDS) + splitter.revenue == 8 * 200 * 7
